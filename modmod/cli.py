"""The command line: generating track output and creating content stubs."""

from __future__ import annotations

import argparse
import os
import shutil
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path

from .create import CreateError, create_exercise, create_module, create_topic, create_unit
from .patch import GenPatchError, render_patch
from .slides import SlidesRenderOptions
from .track import LoadTrackError, load_track, render_track


class ModModError(Exception):
    """Running a command failed."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "Error running ModMod"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


def run_generate(
    out_dir: str | os.PathLike[str],
    track_toml_path: str | os.PathLike[str],
    clear_output_dir: bool = False,
    slide_url_base: str = "/",
    patch_file: str | os.PathLike[str] | None = None,
    slide_theme: str = "teach-rs",
    package_json: str | os.PathLike[str] | None = None,
) -> None:
    """Render a track into ``out_dir``, or into a patch file against it."""
    slide_opts = SlidesRenderOptions(
        theme=slide_theme,
        package_json=Path(package_json) if package_json is not None else None,
        url_base=slide_url_base,
    )
    render_dir = Path(out_dir)
    tmp_dir: Path | None = None
    if patch_file is not None:
        tmp_dir = Path(tempfile.gettempdir()) / "modmod_tmp"
        render_dir = tmp_dir

    try:
        track = load_track(track_toml_path)
        render_track(track, render_dir, slide_opts, clear_output_dir)
        if tmp_dir is not None and patch_file is not None:
            render_patch(tmp_dir, out_dir, patch_file)
            shutil.rmtree(tmp_dir)
    except (LoadTrackError, GenPatchError, OSError) as exc:
        raise ModModError(str(exc)) from exc


def _index(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("index must not be negative")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="modmod")
    commands = parser.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("generate", help="Render a track")
    gen.add_argument(
        "-o", "--output", dest="out_dir", type=Path, required=True,
        help="The folder the output will be written to",
    )
    gen.add_argument(
        "-c", "--clear", dest="clear_output_dir", action="store_true",
        help="Clear the output folder",
    )
    gen.add_argument(
        "--slide-url-base", default="/",
        help="Use this as a base when deploying the slides to a web server",
    )
    gen.add_argument(
        "-p", "--patch", dest="patch_file", type=Path,
        help="Generate patch file to update output dir at given path",
    )
    gen.add_argument("track_toml_path", type=Path)
    gen.add_argument(
        "--theme", dest="slide_theme", default="teach-rs",
        help="The name of the Slidev theme to use in generated slide decks",
    )
    gen.add_argument(
        "--json-stub", dest="package_json", type=Path,
        help="The path of the package.json stub to use when generating the slide package",
    )

    create = commands.add_parser("create", help="Create a content stub")
    create.add_argument("-f", "--force", action="store_true")
    what = create.add_subparsers(dest="what", required=True)

    module = what.add_parser("module")
    module.add_argument("path", type=Path)
    module.add_argument("name")
    module.add_argument("description")

    unit = what.add_parser("unit")
    unit.add_argument("module", type=Path)
    unit.add_argument("name")
    unit.add_argument("-i", "--index", type=_index)

    topic = what.add_parser("topic")
    topic.add_argument("module", type=Path)
    topic.add_argument(
        "-i", "--index", dest="unit_index", type=_index,
        help="The unit to which to add the topic to. Defaults to the last unit",
    )
    topic.add_argument("dir", type=Path)
    topic.add_argument("name")
    topic.add_argument("description", nargs="?")

    exercise = what.add_parser("exercise")
    exercise.add_argument("topic", type=Path)
    exercise.add_argument(
        "-i", "--index", type=_index,
        help="The index of the exercise in the list of exercises for the given topic. "
        "Defaults to the last one",
    )
    exercise.add_argument("name")
    return parser


def _run_create(args: argparse.Namespace) -> None:
    if args.what == "module":
        create_module(args.path, args.name, args.description, args.force)
    elif args.what == "unit":
        create_unit(args.module, args.name, args.index)
    elif args.what == "topic":
        create_topic(
            args.module, args.dir, args.name, args.description, args.unit_index, args.force
        )
    else:
        create_exercise(args.topic, args.name, args.index, args.force)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    if args.command == "generate":
        try:
            run_generate(
                args.out_dir,
                args.track_toml_path,
                args.clear_output_dir,
                args.slide_url_base,
                args.patch_file,
                args.slide_theme,
                args.package_json,
            )
        except ModModError as exc:
            print(f"Error rendering track: {exc}", file=sys.stderr)
            return 1
    else:
        try:
            _run_create(args)
        except CreateError as exc:
            print(f"Error creating content stub: {exc}", file=sys.stderr)
            return 1
    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())