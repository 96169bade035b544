"""Filesystem helpers that report failures together with the path involved."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO


class FileOperationError(Exception):
    """A filesystem operation failed; the message names the path."""


def create_dir_all(path: str | os.PathLike[str]) -> None:
    """Create a directory and all of its missing parents."""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as exc:
        raise FileOperationError(f"Error creating directory at path {path}") from exc


def read_to_string(path: str | os.PathLike[str]) -> str:
    """Read a whole UTF-8 text file."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(f"Error reading file at path {path}") from exc


def try_create_file(path: str | os.PathLike[str], force: bool) -> TextIO:
    """Open a file for writing, truncating it.

    Unless ``force`` is set, an existing file is an error.
    """
    target = Path(path)
    if target.exists() and not force:
        raise FileOperationError(f"Path at {target} already exists")
    try:
        return open(target, "w", encoding="utf-8", newline="")
    except OSError as exc:
        raise FileOperationError(f"Error creating file at path {target}") from exc


def create_file(path: str | os.PathLike[str]) -> TextIO:
    """Open a file for writing, creating or truncating it."""
    return try_create_file(path, True)


def get_dir_files(path: str | os.PathLike[str]) -> list[Path]:
    """Return every file below a directory, recursively, in sorted order."""
    root = Path(path)
    if not root.is_dir():
        raise FileOperationError(f"Error getting contents of directory at path {root}")
    try:
        return sorted(entry for entry in root.rglob("*") if entry.is_file())
    except OSError as exc:
        raise FileOperationError(
            f"Error getting contents of directory at path {root}"
        ) from exc


def copy_file(src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Copy a file's content and permission bits to ``dest``."""
    try:
        shutil.copyfile(src, dest)
        shutil.copymode(src, dest)
    except OSError as exc:
        raise FileOperationError(f"Error copying file from {src} to {dest}") from exc


def copy_files(
    files: Iterable[str | os.PathLike[str]], dest: str | os.PathLike[str]
) -> None:
    """Copy each file into the directory ``dest``, keeping its file name."""
    dest_dir = Path(dest)
    for file in map(Path, files):
        if file.name in ("", ".."):
            continue
        copy_file(file, dest_dir / file.name)