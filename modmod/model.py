"""The resolved track structure: modules, units, topics and exercises."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Exercise:
    """An exercise package with its description and included files."""

    index: int
    name: str
    path: Path
    description: Path
    description_images: list[Path] = field(default_factory=list)
    includes: list[str] = field(default_factory=list)


@dataclass
class Topic:
    """A topic of a unit: slide content, exercises and learning material."""

    index: int
    name: str
    content: Path
    exercises: list[Exercise] = field(default_factory=list)
    summary: list[str] = field(default_factory=list)
    objectives: list[str] = field(default_factory=list)
    further_reading: list[str] = field(default_factory=list)
    images: list[Path] = field(default_factory=list)


@dataclass
class Unit:
    """A unit of a module, rendered as one slide deck and one book section."""

    index: int
    name: str
    template: Path | None = None
    topics: list[Topic] = field(default_factory=list)


@dataclass
class Module:
    """A module of a track, rendered as one book chapter."""

    index: int
    name: str
    description: str
    units: list[Unit] = field(default_factory=list)


@dataclass
class Track:
    """A complete course track."""

    name: str
    modules: list[Module] = field(default_factory=list)