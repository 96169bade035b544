"""Loading a whole track and rendering its exercises, book and slides."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .book import Book, Chapter, RenderBookError, Section, SubSection
from .exercises import (
    ExerciseCollection,
    ModuleExercises,
    RenderExercisesError,
    UnitExercises,
)
from .fsutil import FileOperationError, create_dir_all
from .load import HydrateTrackError, LoadError, TrackDef, load_def, resolve_track
from .model import Module, Topic, Track, Unit
from .slides import (
    RenderSlidesError,
    SlideDeck,
    SlideSection,
    SlidesPackage,
    SlidesRenderOptions,
)


class LoadTrackError(Exception):
    """A track could not be loaded or rendered."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "Unable to load track"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


def load_track(path: str | os.PathLike[str]) -> Track:
    """Load a track definition file and resolve everything it refers to."""
    try:
        return resolve_track(load_def(TrackDef, path))
    except (LoadError, HydrateTrackError) as exc:
        raise LoadTrackError(str(exc)) from exc


def _add_topic(
    topic: Topic, section: Section, deck: SlideDeck, unit_exercises: UnitExercises
) -> None:
    deck.sections.append(
        SlideSection(
            content=topic.content,
            objectives=list(topic.objectives),
            summary=list(topic.summary),
            further_reading=list(topic.further_reading),
            images=list(topic.images),
        )
    )
    for exercise in topic.exercises:
        section.subsections.append(
            SubSection(
                title=exercise.name,
                content=exercise.description,
                images=list(exercise.description_images),
                exercise_path=exercise.path,
            )
        )
        unit_exercises.add_package(exercise.name, exercise.path, exercise.includes)


def _add_unit(
    unit: Unit,
    module: Module,
    chapter: Chapter,
    slides: SlidesPackage,
    module_exercises: ModuleExercises,
) -> None:
    section = Section(title=unit.name, module_index=module.index, unit_index=unit.index)
    deck = SlideDeck(
        name=unit.name,
        module_name=module.name,
        module_index=module.index,
        unit_index=unit.index,
        template=unit.template,
    )
    unit_exercises = UnitExercises(index=unit.index, name=unit.name)
    for topic in unit.topics:
        _add_topic(topic, section, deck, unit_exercises)
    chapter.sections.append(section)
    slides.decks.append(deck)
    module_exercises.unit_exercises.append(unit_exercises)


def _collect(track: Track) -> tuple[Book, SlidesPackage, ExerciseCollection]:
    book = Book(title=track.name)
    slides = SlidesPackage(name=track.name)
    exercises = ExerciseCollection()
    for module in track.modules:
        chapter = Chapter(title=module.name, module_index=module.index)
        module_exercises = ModuleExercises(index=module.index, name=module.name)
        for unit in module.units:
            _add_unit(unit, module, chapter, slides, module_exercises)
        book.chapters.append(chapter)
        exercises.module_exercises.append(module_exercises)
    return book, slides, exercises


def _prepare_output(out_dir: str | os.PathLike[str], clear_output_dir: bool) -> Path:
    create_dir_all(out_dir)
    try:
        target = Path(out_dir).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise LoadTrackError(f"Unable to canonicalize path {out_dir}") from exc
    if clear_output_dir:
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise LoadTrackError(f"Unable to remove output directory {target}") from exc
    else:
        try:
            has_entries = next(target.iterdir(), None) is not None
        except OSError as exc:
            raise LoadTrackError(f"Unable to read output directory {target}") from exc
        if has_entries:
            raise LoadTrackError("Output directory is not empty")
    create_dir_all(target)
    return target


def render_track(
    track: Track,
    out_dir: str | os.PathLike[str],
    slide_opts: SlidesRenderOptions | None = None,
    clear_output_dir: bool = False,
) -> None:
    """Render exercise packages, the book and the slides of ``track`` into ``out_dir``.

    The output directory must be empty unless ``clear_output_dir`` is set, in
    which case its contents are removed first.
    """
    options = slide_opts if slide_opts is not None else SlidesRenderOptions()
    try:
        target = _prepare_output(out_dir, clear_output_dir)
        book, slides, exercises = _collect(track)
        exercise_paths = exercises.render(target)
        book.render(exercise_paths, options.url_base, target)
        slides.render(target, options)
    except (
        FileOperationError,
        RenderExercisesError,
        RenderBookError,
        RenderSlidesError,
    ) as exc:
        raise LoadTrackError(str(exc)) from exc