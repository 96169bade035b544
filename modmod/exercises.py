"""Collecting exercise packages and copying their included files to the output."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from .fsutil import FileOperationError, copy_file, create_dir_all, get_dir_files
from .tags import to_prefixed_tag


class RenderExercisesError(Exception):
    """The exercise packages could not be rendered."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "unable to render exercises"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


@dataclass
class ExercisePackage:
    """An exercise directory and the glob patterns of the files it ships."""

    index: int
    name: str
    path: Path
    includes: list[str] = field(default_factory=list)


@dataclass
class UnitExercises:
    """The exercise packages of one unit."""

    index: int
    name: str
    exercises: list[ExercisePackage] = field(default_factory=list)

    def add_package(
        self, name: str, path: str | os.PathLike[str], includes: list[str]
    ) -> ExercisePackage:
        """Append a package, numbered after the ones already present."""
        package = ExercisePackage(
            index=len(self.exercises) + 1,
            name=name,
            path=Path(path),
            includes=list(includes),
        )
        self.exercises.append(package)
        return package


@dataclass
class ModuleExercises:
    """The exercises of one module, grouped by unit."""

    index: int
    name: str
    unit_exercises: list[UnitExercises] = field(default_factory=list)


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a glob where ``*`` also matches path separators."""
    parts: list[str] = []
    i, n = 0, len(pattern)
    in_alt = False
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                j = i + 2
                at_start = i == 0 or pattern[i - 1] == "/"
                if at_start and j < n and pattern[j] == "/":
                    parts.append("(?:.*/)?")
                    i = j + 1
                    continue
                parts.append(".*")
                i = j
                continue
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise ValueError("unclosed character class")
            body = pattern[i + 1 : j]
            negate = body[:1] in ("!", "^")
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\").replace("^", "\\^")
            parts.append(f"[{'^' if negate else ''}{body}]")
            i = j
        elif c == "{":
            if in_alt:
                raise ValueError("nested alternates")
            in_alt = True
            parts.append("(?:")
        elif c == "}" and in_alt:
            in_alt = False
            parts.append(")")
        elif c == "," and in_alt:
            parts.append("|")
        elif c == "\\":
            if i + 1 >= n:
                raise ValueError("dangling escape")
            i += 1
            parts.append(re.escape(pattern[i]))
        else:
            parts.append(re.escape(c))
        i += 1
    if in_alt:
        raise ValueError("unclosed alternate group")
    return re.compile("".join(parts), re.DOTALL)


@dataclass
class ExerciseCollection:
    """All exercise packages of a track."""

    module_exercises: list[ModuleExercises] = field(default_factory=list)

    def render(self, output_dir: str | os.PathLike[str]) -> dict[Path, Path]:
        """Copy included files below ``output_dir/exercises``.

        Returns a map from each package's source path to its output directory,
        relative to ``output_dir``.
        """
        try:
            return self._render(Path(output_dir))
        except FileOperationError as exc:
            raise RenderExercisesError(str(exc)) from exc

    def _render(self, output_dir: Path) -> dict[Path, Path]:
        root = output_dir / "exercises"
        create_dir_all(root)
        output_paths: dict[Path, Path] = {}

        for module in self.module_exercises:
            module_dir = root / to_prefixed_tag(module.name, module.index)
            create_dir_all(module_dir)
            for unit in module.unit_exercises:
                unit_dir = module_dir / to_prefixed_tag(unit.name, unit.index)
                create_dir_all(unit_dir)
                for package in unit.exercises:
                    package_dir = unit_dir / to_prefixed_tag(package.name, package.index)
                    create_dir_all(package_dir)
                    source = Path(package.path)
                    files = get_dir_files(source)
                    matchers = []
                    for include in package.includes:
                        try:
                            matchers.append(_glob_to_regex((source / include).as_posix()))
                        except ValueError as exc:
                            raise RenderExercisesError(
                                f"Error parsing include glob '{include}'"
                            ) from exc
                    for file in files:
                        text = file.as_posix()
                        if not any(m.fullmatch(text) for m in matchers):
                            continue
                        dest = package_dir / file.relative_to(source)
                        create_dir_all(dest.parent)
                        copy_file(file, dest)
                    output_paths[source] = package_dir.relative_to(output_dir)
        return output_paths