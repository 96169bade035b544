"""Generating a unified-diff patch between two rendered output directories."""

from __future__ import annotations

import difflib
import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import AnyStr

from .fsutil import FileOperationError, get_dir_files

_NO_NEWLINE = "\\ No newline at end of file"


class GenPatchError(Exception):
    """The patch could not be generated."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "unable to render exercises"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


def _split_lines(text: AnyStr) -> list[AnyStr]:
    if isinstance(text, bytes):
        return re.findall(rb"[^\n]*\n|[^\n]+", text)
    return re.findall(r"[^\n]*\n|[^\n]+", text)


def _unified_diff(old: AnyStr, new: AnyStr, relative: str) -> Iterator[AnyStr]:
    """Yield unified diff lines, each ending in a newline."""
    old_lines = _split_lines(old)
    new_lines = _split_lines(new)
    if isinstance(old, bytes):
        diff = difflib.diff_bytes(
            difflib.unified_diff,
            old_lines,
            new_lines,
            f"a/{relative}".encode(),
            f"b/{relative}".encode(),
            lineterm=b"\n",
        )
        hint = f"\n{_NO_NEWLINE}\n".encode()
        newline = b"\n"
    else:
        diff = difflib.unified_diff(
            old_lines, new_lines, f"a/{relative}", f"b/{relative}", lineterm="\n"
        )
        hint = f"\n{_NO_NEWLINE}\n"
        newline = "\n"
    for line in diff:
        yield line if line.endswith(newline) else line + hint


def render_patch(
    new_dir: str | os.PathLike[str],
    old_dir: str | os.PathLike[str],
    patch_file: str | os.PathLike[str],
) -> None:
    """Write a patch that turns ``old_dir`` into ``new_dir`` to ``patch_file``."""
    new_root = Path(new_dir)
    old_root = Path(old_dir)
    try:
        out = open(patch_file, "wb")
    except OSError as exc:
        raise GenPatchError(f"Error creating patch file at {patch_file}") from exc

    with out:
        try:
            files = get_dir_files(new_root)
        except FileOperationError as exc:
            raise GenPatchError(str(exc)) from exc

        for new_path in files:
            relative = new_path.relative_to(new_root)
            old_path = old_root / relative
            try:
                new_bytes = new_path.read_bytes()
            except OSError as exc:
                raise GenPatchError(f"Error opening file at path {new_path}") from exc
            try:
                old_bytes = old_path.read_bytes()
            except FileNotFoundError:
                print(f"File not found at {old_path}")
                old_bytes = b""
            except OSError as exc:
                raise GenPatchError(f"Error opening file at path {old_path}") from exc

            rel = relative.as_posix()
            try:
                new_text = new_bytes.decode("utf-8")
                old_text = old_bytes.decode("utf-8")
            except UnicodeDecodeError:
                try:
                    out.writelines(_unified_diff(old_bytes, new_bytes, rel))
                except OSError as exc:
                    raise GenPatchError(f"Error writing patch for {rel}") from exc
                continue

            if old_text and old_text == new_text:
                print(f"{new_path} and {old_path} are the same")
                continue
            try:
                out.write("".join(_unified_diff(old_text, new_text, rel)).encode("utf-8"))
            except OSError as exc:
                raise GenPatchError(f"Error writing patch for {rel}") from exc