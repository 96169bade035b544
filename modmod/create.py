"""Creating stubs for modules, units, topics and exercises."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

from .fsutil import FileOperationError, create_dir_all, create_file, try_create_file
from .load import ExerciseDef, LoadError, ModuleDef, TopicDef, UnitDef, dump_toml, load_def

T = TypeVar("T")


class CreateError(Exception):
    """A content stub could not be created."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "unable to create content stub"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


@contextmanager
def _reported() -> Iterator[None]:
    try:
        yield
    except (FileOperationError, LoadError) as exc:
        raise CreateError(str(exc)) from exc


def _dedup_consecutive(items: list[T], key: Callable[[T], Any] = lambda item: item) -> list[T]:
    """Drop items equal (by ``key``) to the one just before them."""
    result: list[T] = []
    for item in items:
        if result and key(result[-1]) == key(item):
            continue
        result.append(item)
    return result


def _clamped_index(index: int | None, length: int) -> int:
    return length if index is None else min(index, length)


def _write_definition(path: Path, definition: Any) -> None:
    with create_file(path) as out:
        out.write(dump_toml(definition))


def create_module(
    path: str | os.PathLike[str], name: str, description: str, force: bool = False
) -> None:
    """Create a directory holding a new mod.toml without units."""
    directory = Path(path)
    with _reported():
        create_dir_all(directory)
        with try_create_file(directory / "mod.toml", force) as out:
            out.write(dump_toml(ModuleDef(name=name, description=description, units=[])))


def create_unit(
    module_path: str | os.PathLike[str], name: str, index: int | None = None
) -> None:
    """Insert an empty unit into a module, at ``index`` or at the end."""
    path = Path(module_path)
    with _reported():
        module = load_def(ModuleDef, path).data
        position = _clamped_index(index, len(module.units))
        module.units.insert(position, UnitDef(name=name, template=None, topics=[]))
        _write_definition(path, module)


def create_topic(
    module_path: str | os.PathLike[str],
    dir_name: str | os.PathLike[str],
    name: str,
    description: str | None = None,
    unit_index: int | None = None,
    force: bool = False,
) -> None:
    """Create a topic directory and attach it to a unit of the module.

    The unit defaults to the last one. ``description`` is accepted for the
    command line but not stored.
    """
    path = Path(module_path)
    with _reported():
        module = load_def(ModuleDef, path).data
        if not module.units:
            raise CreateError(
                "There are no units to attach the topic to. Create units first."
            )
        max_unit_index = len(module.units) - 1
        chosen = max_unit_index if unit_index is None else unit_index
        if not 0 <= chosen <= max_unit_index:
            raise CreateError(
                "No unit at that index yet. Pick a number between 0 and "
                f"{max_unit_index} or create more units first"
            )
        unit = module.units[chosen]

        topic_dir = path.parent / "topics" / dir_name
        create_dir_all(topic_dir)
        with try_create_file(topic_dir / "topic.toml", force) as topic_toml:
            unit.topics.append(Path(dir_name) / "mod.toml")
            unit.topics = _dedup_consecutive(unit.topics)
            topic_toml.write(dump_toml(TopicDef(name=name)))
        try_create_file(topic_dir / "slides.md", force).close()
        _write_definition(path, module)


def create_exercise(
    topic_path: str | os.PathLike[str],
    name: str,
    index: int | None = None,
    force: bool = False,
) -> None:
    """Create an exercise crate with ``cargo new`` and register it in the topic."""
    path = Path(topic_path)
    with _reported():
        topic = load_def(TopicDef, path).data
        position = _clamped_index(index, len(topic.exercises))

        exercises_dir = path.parent / "exercises"
        create_dir_all(exercises_dir)
        crate_path = exercises_dir.resolve() / name.lower()
        if force and crate_path.exists():
            try:
                shutil.rmtree(crate_path)
            except OSError as exc:
                raise CreateError(f"Unable to remove {crate_path}") from exc

        try:
            result = subprocess.run(
                ["cargo", "new", "--name", name, "--bin", str(crate_path)],
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise CreateError(f"Unable to run `cargo new`: {exc}") from exc
        if result.returncode != 0:
            stdout = (result.stdout or b"").decode("utf-8", errors="replace")
            stderr = (result.stderr or b"").decode("utf-8", errors="replace")
            raise CreateError(
                "`cargo new` command process exited unsuccessfully\n"
                f'Stdout: "{stdout}"\n'
                f'Stderr: "{stderr}"\n'
                f"exit status: {result.returncode}"
            )

        relative = crate_path.relative_to(path.parent.resolve())
        topic.exercises.insert(position, ExerciseDef(name=name, path=relative))
        topic.exercises = _dedup_consecutive(
            topic.exercises, key=lambda exercise: Path(exercise.path)
        )
        _write_definition(path, topic)