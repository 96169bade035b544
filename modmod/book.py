"""Rendering the exercise book: book.toml, SUMMARY.md and one page per unit."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .fsutil import (
    FileOperationError,
    copy_files,
    create_dir_all,
    create_file,
    read_to_string,
)
from .tags import to_tag

IMAGE_PLACEHOLDER = "#[modmod:images]"
EXERCISE_DIR_PLACEHOLDER = "#[modmod:exercise_dir]"
EXERCISE_REF_PLACEHOLDER = "#[modmod:exercise_ref]"


class RenderBookError(Exception):
    """The book could not be rendered."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        message = "unable to render book"
        if reason is not None:
            message = f"{message}\n{reason}"
        super().__init__(message)


@dataclass
class SubSection:
    """One exercise description within a unit page."""

    title: str
    content: Path
    images: list[Path] = field(default_factory=list)
    exercise_path: Path = Path()


@dataclass
class Section:
    """A unit page of the book."""

    title: str
    module_index: int
    unit_index: int
    subsections: list[SubSection] = field(default_factory=list)


@dataclass
class Chapter:
    """A module of the book, holding one section per unit."""

    title: str
    module_index: int
    sections: list[Section] = field(default_factory=list)


def _with_md_extension(name: str) -> str:
    stem, dot, _ = name.rpartition(".")
    if dot and stem:
        return f"{stem}.md"
    return f"{name}.md"


def _book_toml(title: str) -> str:
    return (
        "[book]\n"
        f'title = "{title}"\n'
        'language = "en"\n'
        "multilingual = false\n"
        "\n"
        "[build]\n"
        'build-dir = "./target"\n'
    )


@dataclass
class Book:
    """The exercise book of a track."""

    title: str
    chapters: list[Chapter] = field(default_factory=list)

    def render(
        self,
        exercise_paths: Mapping[Path, Path],
        slides_url_base: str,
        out_dir: str | os.PathLike[str],
    ) -> None:
        """Write the book sources below ``out_dir/book``."""
        try:
            self._render(exercise_paths, slides_url_base, Path(out_dir))
        except FileOperationError as exc:
            raise RenderBookError(str(exc)) from exc

    def _render(
        self, exercise_paths: Mapping[Path, Path], slides_url_base: str, out_dir: Path
    ) -> None:
        url_base = slides_url_base.strip("/")
        url_sep = "/" if url_base else ""
        book_out_dir = out_dir / "book"
        book_src_dir = book_out_dir / "src"
        create_dir_all(book_src_dir)

        with create_file(book_out_dir / "book.toml") as book_toml:
            book_toml.write(_book_toml(self.title))

        with create_file(book_src_dir / "SUMMARY.md") as summary:
            summary.write("# Summary\n\n")
            for chapter_i, chapter in enumerate(self.chapters, start=1):
                # Draft chapter entries keep mdbook's numbering in step with ours.
                summary.write(f"- [{chapter.title}]()\n")
                for section_i, section in enumerate(chapter.sections, start=1):
                    file_name = _with_md_extension(to_tag(section.title))
                    summary.write(f"\t- [{section.title}]({file_name})\n")
                    self._render_section(
                        section,
                        book_src_dir,
                        book_src_dir / file_name,
                        chapter_i,
                        section_i,
                        exercise_paths,
                        url_base,
                        url_sep,
                    )
                summary.write("\n")

    @staticmethod
    def _render_section(
        section: Section,
        book_src_dir: Path,
        section_path: Path,
        chapter_i: int,
        section_i: int,
        exercise_paths: Mapping[Path, Path],
        url_base: str,
        url_sep: str,
    ) -> None:
        with create_file(section_path) as out:
            out.write(
                f"# Unit {chapter_i}.{section_i} - {section.title}\n\n"
                f'<a href="/{url_base}{url_sep}slides/{chapter_i}_{section_i}/" '
                'target="_blank">Slides</a>\n\n\n'
            )
            if not section.subsections:
                out.write("*There are no exercises for this unit*")
                return
            for sub_i, sub in enumerate(section.subsections, start=1):
                ref = f"{chapter_i}.{section_i}.{sub_i}"
                out.write(f"## Exercise {ref}: {sub.title}\n\n")
                exercise_path = Path(sub.exercise_path)
                try:
                    exercise_out_dir = exercise_paths[exercise_path]
                except KeyError:
                    raise RenderBookError(
                        f"No rendered exercise package for {exercise_path}"
                    ) from None
                images_subdir = f"images/{chapter_i}/{section_i}/{sub_i}"
                if sub.images:
                    images_dir = book_src_dir / images_subdir
                    create_dir_all(images_dir)
                    copy_files(sub.images, images_dir)

                content = read_to_string(sub.content)
                check_images(exercise_path, content, sub.images, exercise_path / "images")
                content = (
                    content.replace(EXERCISE_DIR_PLACEHOLDER, str(exercise_out_dir))
                    .replace(EXERCISE_REF_PLACEHOLDER, ref)
                    .replace(IMAGE_PLACEHOLDER, images_subdir)
                    .replace("\n# ", "\n### ")
                )
                out.write(f"{content.strip()}\n")


def find_image_placeholders(content: str) -> set[str]:
    """Collect the image names referenced through the image placeholder."""
    found: set[str] = set()
    rest = content
    while True:
        pos = rest.find(IMAGE_PLACEHOLDER)
        if pos < 0:
            break
        rest = rest[pos + len(IMAGE_PLACEHOLDER):]
        end = rest.find(")")
        if end < 0:
            break
        found.add(rest[:end].lstrip("/"))
        rest = rest[end + 1:]
    return found


def check_images(
    exercise_path: str | os.PathLike[str],
    content: str,
    existing_images: Iterable[str | os.PathLike[str]],
    base_path: str | os.PathLike[str],
) -> None:
    """Raise if images are unreferenced or references point to missing images."""
    referenced = find_image_placeholders(content)
    base = Path(base_path)
    unused: list[str] = []
    for image in map(Path, existing_images):
        try:
            relative = image.relative_to(base)
        except ValueError:
            unused.append(str(image))
            continue
        key = relative.as_posix()
        if key in referenced:
            referenced.discard(key)
        else:
            unused.append(str(image))

    messages = []
    if unused:
        messages.append(f"💥 {exercise_path}: Unused images: {', '.join(unused)}")
    if referenced:
        messages.append(
            f"💥 {exercise_path}: Non existing images: {', '.join(sorted(referenced))}"
        )
    if messages:
        raise RenderBookError("\n".join(messages))