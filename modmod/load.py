"""Loading TOML track definitions and resolving their path references."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, TypeVar

import tomli_w

from .fsutil import FileOperationError, get_dir_files
from .model import Exercise, Module, Topic, Track, Unit

T = TypeVar("T")

DEFAULT_EXERCISE_DESCRIPTION = Path("description.md")
DEFAULT_EXERCISE_INCLUDES = ("Cargo.toml", "Cargo.lock", "src/**/*")
DEFAULT_TOPIC_CONTENT = Path("slides.md")


class LoadError(Exception):
    """A definition file could not be found, read or parsed."""

    def __init__(self, kind: str, path: Path, detail: str | None = None) -> None:
        self.kind = kind
        self.path = path
        self.detail = detail
        message = f"unable to load item of type {kind} from path {path}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class HydrateTrackError(Exception):
    """A path referenced by a definition could not be resolved."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "Error resolving track path references"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


@dataclass
class PathTo(Generic[T]):
    """A loaded definition together with the canonical path it came from."""

    data: T
    path: Path


_MISSING = object()


def _table(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("expected a table")
    return data


def _field(data: Mapping[str, Any], key: str, kind: type, default: Any = _MISSING) -> Any:
    if key not in data:
        if default is _MISSING:
            raise ValueError(f"missing field `{key}`")
        return default
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(f"invalid type for field `{key}`: expected {kind.__name__}")
    return value


def _str_list(data: Mapping[str, Any], key: str, default: tuple[str, ...] = ()) -> list[str]:
    values = _field(data, key, list, list(default))
    if not all(isinstance(value, str) for value in values):
        raise ValueError(f"invalid type for field `{key}`: expected strings")
    return list(values)


def _path_list(data: Mapping[str, Any], key: str) -> list[Path]:
    return [Path(value) for value in _str_list(data, key)]


def _table_list(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    return [_table(item) for item in _field(data, key, list, [])]


def _canonical(path: Path) -> Path:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise HydrateTrackError(f"Unable to canonicalize path {path}") from exc


@dataclass
class ExerciseDef:
    """An exercise entry in a topic definition."""

    name: str
    path: Path
    description: Path = DEFAULT_EXERCISE_DESCRIPTION
    includes: list[str] = field(default_factory=lambda: list(DEFAULT_EXERCISE_INCLUDES))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExerciseDef:
        data = _table(data)
        return cls(
            name=_field(data, "name", str),
            path=Path(_field(data, "path", str)),
            description=Path(
                _field(data, "description", str, str(DEFAULT_EXERCISE_DESCRIPTION))
            ),
            includes=_str_list(data, "includes", DEFAULT_EXERCISE_INCLUDES),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "path": str(self.path)}
        if Path(self.description) != DEFAULT_EXERCISE_DESCRIPTION:
            result["description"] = str(self.description)
        if list(self.includes) != list(DEFAULT_EXERCISE_INCLUDES):
            result["includes"] = list(self.includes)
        return result

    def resolve(self, index: int, base_path: Path) -> Exercise:
        """Resolve the exercise paths relative to the topic directory."""
        path = _canonical(Path(base_path) / self.path)
        description = _canonical(path / self.description)
        return Exercise(
            index=index,
            name=self.name,
            path=path,
            description=description,
            description_images=dir_content(path / "images"),
            includes=list(self.includes),
        )


@dataclass
class TopicDef:
    """The contents of a topic.toml file."""

    name: str
    exercises: list[ExerciseDef] = field(default_factory=list)
    summary: list[str] = field(default_factory=list)
    objectives: list[str] = field(default_factory=list)
    content: Path = DEFAULT_TOPIC_CONTENT
    further_reading: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TopicDef:
        data = _table(data)
        return cls(
            name=_field(data, "name", str),
            exercises=[ExerciseDef.from_dict(item) for item in _table_list(data, "exercises")],
            summary=_str_list(data, "summary"),
            objectives=_str_list(data, "objectives"),
            content=Path(_field(data, "content", str, str(DEFAULT_TOPIC_CONTENT))),
            further_reading=_str_list(data, "further_reading"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.exercises:
            result["exercises"] = [exercise.to_dict() for exercise in self.exercises]
        if self.summary:
            result["summary"] = list(self.summary)
        if self.objectives:
            result["objectives"] = list(self.objectives)
        if Path(self.content) != DEFAULT_TOPIC_CONTENT:
            result["content"] = str(self.content)
        if self.further_reading:
            result["further_reading"] = list(self.further_reading)
        return result


@dataclass
class UnitDef:
    """A unit entry in a module definition."""

    name: str
    template: Path | None = None
    topics: list[Path] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UnitDef:
        data = _table(data)
        template = _field(data, "template", str, None)
        return cls(
            name=_field(data, "name", str),
            template=Path(template) if template is not None else None,
            topics=_path_list(data, "topics"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.template is not None:
            result["template"] = str(self.template)
        result["topics"] = [str(topic) for topic in self.topics]
        return result

    def resolve(self, index: int, base_path: Path) -> Unit:
        """Load and resolve the unit's topics relative to the module directory."""
        base_path = Path(base_path)
        topics = []
        for topic_index, topic_path in enumerate(self.topics, start=1):
            try:
                loaded = load_def(TopicDef, topic_path, base_path)
            except LoadError as exc:
                raise HydrateTrackError(str(exc)) from exc
            topics.append(resolve_topic(loaded, topic_index))
        template = _canonical(base_path / self.template) if self.template is not None else None
        return Unit(index=index, name=self.name, template=template, topics=topics)


@dataclass
class ModuleDef:
    """The contents of a mod.toml file."""

    name: str
    description: str
    units: list[UnitDef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ModuleDef:
        data = _table(data)
        return cls(
            name=_field(data, "name", str),
            description=_field(data, "description", str),
            units=[UnitDef.from_dict(item) for item in _table_list(data, "units")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "units": [unit.to_dict() for unit in self.units],
        }


@dataclass
class TrackDef:
    """The contents of a track definition file."""

    name: str
    modules: list[Path] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrackDef:
        data = _table(data)
        return cls(name=_field(data, "name", str), modules=_path_list(data, "modules"))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "modules": [str(module) for module in self.modules]}


def load_def(kind: type[T], path: str | Path, base_path: str | Path | None = None) -> PathTo[T]:
    """Read and parse a TOML definition of type ``kind``.

    ``path`` is taken relative to ``base_path`` when one is given.
    """
    target = Path(path)
    if base_path is not None:
        target = Path(base_path) / target
    kind_name = kind.__name__
    try:
        canonical = target.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise LoadError(
            kind_name,
            target,
            f"Unable to canonicalize path {target}. "
            "Make sure the path leads to an existing file.",
        ) from exc
    try:
        content = canonical.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(
            kind_name, canonical, f"Unable to read contents of file at path {canonical}"
        ) from exc
    try:
        data = kind.from_dict(tomllib.loads(content))  # type: ignore[attr-defined]
    except ValueError as exc:
        raise LoadError(
            kind_name, canonical, f"Unable to parse TOML file with contents '{content}'"
        ) from exc
    return PathTo(data=data, path=canonical)


def dump_toml(definition: Any) -> str:
    """Serialise a definition to TOML text."""
    return tomli_w.dumps(definition.to_dict())


def dir_content(path: str | Path) -> list[Path]:
    """List the files below ``path``, or nothing if it is not a directory."""
    directory = Path(path)
    if not directory.is_dir():
        return []
    try:
        return get_dir_files(directory)
    except FileOperationError as exc:
        raise HydrateTrackError(str(exc)) from exc


def resolve_topic(loaded: PathTo[TopicDef], index: int) -> Topic:
    """Resolve a loaded topic's exercises, content and images."""
    definition = loaded.data
    base_path = loaded.path.parent
    exercises = [
        exercise.resolve(exercise_index, base_path)
        for exercise_index, exercise in enumerate(definition.exercises, start=1)
    ]
    content = _canonical(base_path / definition.content)
    return Topic(
        index=index,
        name=definition.name,
        content=content,
        exercises=exercises,
        summary=list(definition.summary),
        objectives=list(definition.objectives),
        further_reading=list(definition.further_reading),
        images=dir_content(base_path / "images"),
    )


def resolve_module(loaded: PathTo[ModuleDef], index: int) -> Module:
    """Resolve a loaded module's units."""
    definition = loaded.data
    base_path = loaded.path.parent
    units = [
        unit.resolve(unit_index, base_path)
        for unit_index, unit in enumerate(definition.units, start=1)
    ]
    return Module(
        index=index, name=definition.name, description=definition.description, units=units
    )


def resolve_track(loaded: PathTo[TrackDef]) -> Track:
    """Load and resolve every module a track refers to."""
    definition = loaded.data
    base_path = loaded.path.parent
    modules = []
    for module_index, module_path in enumerate(definition.modules, start=1):
        try:
            module = load_def(ModuleDef, module_path, base_path)
        except LoadError as exc:
            raise HydrateTrackError(str(exc)) from exc
        modules.append(resolve_module(module, module_index))
    return Track(name=definition.name, modules=modules)