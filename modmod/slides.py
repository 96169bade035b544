"""Rendering slide decks and the package.json that builds them."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .fsutil import (
    FileOperationError,
    copy_files,
    create_dir_all,
    create_file,
    read_to_string,
)
from .tags import to_prefixed_tag, to_tag

PACKAGE_JSON_STUB = "{}"
SLIDES_TEMPLATE_DEFAULT = (
    "---\n"
    "theme: #[modmod:theme]\n"
    "---\n"
    "\n"
    "# #[modmod:mod_title]\n"
    "\n"
    "## Unit #[modmod:mod_index].#[modmod:unit_index] - #[modmod:unit_title]\n"
    "\n"
    "---\n"
    "\n"
    "# Learning objectives\n"
    "\n"
    "#[modmod:objectives]\n"
    "#[modmod:content]\n"
    "---\n"
    "\n"
    "# Summary\n"
    "\n"
    "#[modmod:summary]\n"
)


class RenderSlidesError(Exception):
    """The slides package could not be rendered."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "unable to render slides"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


@dataclass
class SlidesRenderOptions:
    """How to render slides: theme, package.json stub and deployment URL base."""

    theme: str = "teach-rs"
    package_json: Path | None = None
    url_base: str = "/"


@dataclass
class SlideSection:
    """The slide material one topic contributes to a deck."""

    content: Path
    objectives: list[str] = field(default_factory=list)
    summary: list[str] = field(default_factory=list)
    further_reading: list[str] = field(default_factory=list)
    images: list[Path] = field(default_factory=list)


@dataclass
class SlideDeck:
    """The slides of one unit."""

    name: str
    module_name: str
    module_index: int
    unit_index: int
    template: Path | None = None
    sections: list[SlideSection] = field(default_factory=list)


@dataclass
class SlidesPackage:
    """All slide decks of a track, named after the track."""

    name: str
    decks: list[SlideDeck] = field(default_factory=list)

    def render(self, out_dir: str | os.PathLike[str], options: SlidesRenderOptions) -> None:
        """Write decks, images and package.json below ``out_dir/slides``."""
        try:
            self._render(Path(out_dir), options)
        except FileOperationError as exc:
            raise RenderSlidesError(str(exc)) from exc

    def _load_package_json(self, options: SlidesRenderOptions) -> dict[str, Any]:
        text = (
            read_to_string(options.package_json)
            if options.package_json is not None
            else PACKAGE_JSON_STUB
        )
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RenderSlidesError(f"Unable to parse package.json stub: {exc}") from exc
        if not isinstance(data, dict):
            raise RenderSlidesError("The package.json stub must hold a JSON object")
        return data

    def _render(self, out_dir: Path, options: SlidesRenderOptions) -> None:
        package_json = self._load_package_json(options)
        package_json["name"] = to_tag(self.name)
        scripts: dict[str, str] = {}

        slides_dir = out_dir / "slides"
        create_dir_all(slides_dir)
        images_dir = slides_dir / "images"
        create_dir_all(images_dir)
        url_base = options.url_base.strip("/")
        url_sep = "/" if url_base else ""

        for deck in self.decks:
            prefix = f"{deck.module_index}_{deck.unit_index}"
            slug = to_prefixed_tag(deck.name, prefix)
            deck_output = (slides_dir / slug).with_suffix(".md")

            content = ""
            objectives = ""
            summary = ""
            for section in deck.sections:
                topic_content = read_to_string(section.content).strip()
                if topic_content:
                    if not topic_content.startswith("---"):
                        content += "---\n\n"
                    content += f"{topic_content}\n"
                objectives += "".join(f"- {item.strip()}\n" for item in section.objectives)
                summary += "".join(f"- {item.strip()}\n" for item in section.summary)

            if not (content or objectives or summary):
                continue

            with create_file(deck_output) as deck_file:
                relative = deck_output.relative_to(slides_dir).as_posix()
                scripts[f"dev-{prefix}"] = f"slidev {relative}"
                scripts[f"build-{prefix}"] = (
                    f"slidev build --download --out dist/{slug} "
                    f"--base /{url_base}{url_sep}slides/{deck.module_index}_{deck.unit_index}/ "
                    f"{relative}"
                )
                scripts[f"export-{prefix}"] = f"slidev export {relative}"

                for section in deck.sections:
                    copy_files(section.images, images_dir)

                template = (
                    read_to_string(deck.template)
                    if deck.template is not None
                    else SLIDES_TEMPLATE_DEFAULT
                )
                deck_file.write(
                    template.replace("#[modmod:mod_title]", deck.module_name)
                    .replace("#[modmod:mod_index]", str(deck.module_index))
                    .replace("#[modmod:unit_index]", str(deck.unit_index))
                    .replace("#[modmod:unit_title]", deck.name)
                    .replace("#[modmod:content]", content)
                    .replace("#[modmod:objectives]", objectives)
                    .replace("#[modmod:summary]", summary)
                    .replace("#[modmod:theme]", options.theme)
                )

        # A trailing key lets every preceding script line end with a comma.
        scripts["_"] = ""

        existing = package_json.get("scripts")
        if existing is None:
            package_json["scripts"] = scripts
        elif isinstance(existing, dict):
            existing.update(scripts)
        else:
            raise RenderSlidesError("The `scripts` entry of package.json is not an object")

        with create_file(slides_dir / "package.json") as out:
            out.write(json.dumps(package_json, indent=2, ensure_ascii=False))