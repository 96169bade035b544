# modmod

modmod turns a course described in TOML files into three sets of sources:

- **an exercise book** in mdbook layout (`book/`): a `book.toml`, a `SUMMARY.md`
  with one chapter per module, and one page per unit with every exercise
  description filled in;
- **slide decks** for Slidev (`slides/`): one Markdown deck per unit, the topics'
  images in `slides/images/`, and a `package.json` with `dev-`, `build-` and
  `export-` scripts for each deck;
- **exercise packages** (`exercises/`): copies of each exercise's files selected
  by its include globs.

Python 3.11 or later is required.

## Installation

```
pip install .
```

## Describing a track

A track is a tree of TOML files:

- the track file names the track and lists module files (`modules`);
- each module file (`mod.toml`) has a `name`, a `description` and a list of
  `units`; each unit has a `name`, a list of `topics` files and, optionally, a
  slide `template`;
- each topic file has a `name`, optional `summary`, `objectives` and
  `further_reading` lists, a `content` file (default `slides.md`) and a list of
  `exercises`;
- each exercise has a `name`, a `path`, a `description` file (default
  `description.md`) and `includes` globs (default `Cargo.toml`, `Cargo.lock`,
  `src/**/*`).

Relative paths are taken from the directory of the file that names them.

Images in a topic's `images/` directory go with its slides; images in an
exercise's `images/` directory are copied into the book. Exercise descriptions
refer to them as `#[modmod:images]/name.svg`. Every image in the directory must be
referenced and every reference must exist, or rendering fails naming both lists.
Descriptions may also use `#[modmod:exercise_dir]` (the exercise's output
directory) and `#[modmod:exercise_ref]` (its number, such as `1.2.3`).

A slide template may use `#[modmod:mod_title]`, `#[modmod:mod_index]`,
`#[modmod:unit_index]`, `#[modmod:unit_title]`, `#[modmod:objectives]`,
`#[modmod:content]`, `#[modmod:summary]` and `#[modmod:theme]`; without one a
built-in template is used. Units with no slide content, objectives or summary get
no deck.

## Generating output

```
modmod generate -o out path/to/track.toml
```

Options:

- `-o`, `--output DIR` – the output directory (required);
- `-c`, `--clear` – remove the output directory's contents first; without it the
  directory must be empty;
- `--slide-url-base URL` – URL prefix the slides are served from (default `/`);
- `--theme NAME` – the Slidev theme for the decks (default `teach-rs`);
- `--json-stub FILE` – a `package.json` to start the slide package from; its
  `name` is replaced and the deck scripts are added to its `scripts`;
- `-p`, `--patch FILE` – render into `modmod_tmp` in the system temporary
  directory instead, write a unified diff from the `--output` directory to the
  rendered files into `FILE`, then remove the temporary directory. Files that
  exist only in the output directory do not appear in the patch.

On success the command prints `Done!`; on failure it prints the error and exits
with status 1.

## Creating content stubs

```
modmod create module path/to/module "Module name" "What it covers"
modmod create unit path/to/module/mod.toml "Unit name"
modmod create topic path/to/module/mod.toml topic-dir "Topic name"
modmod create exercise path/to/topic/topic.toml exercise-name
```

- `module` creates the directory and a `mod.toml` without units.
- `unit` inserts an empty unit; `-i`/`--index` picks the position (default: last).
- `topic` creates `topics/<dir>/topic.toml` and an empty `slides.md` next to the
  module file, and adds `<dir>/mod.toml` to a unit's topic list; `-i`/`--index`
  picks the unit (default: the last one). The optional description argument is
  not stored.
- `exercise` runs `cargo new --bin` for a crate named after the exercise in the
  topic's `exercises/` directory and adds it to the topic; `-i`/`--index` picks
  the position (default: last). This needs `cargo` on the `PATH`.

`-f`/`--force` goes before the kind (`modmod create -f topic ...`). It lets
`module` and `topic` overwrite existing files, and makes `exercise` remove an
existing crate directory first.

## Using it from Python

```python
from pathlib import Path

from modmod.slides import SlidesRenderOptions
from modmod.track import load_track, render_track

track = load_track(Path("track.toml"))
render_track(track, Path("out"), SlidesRenderOptions(theme="default"), clear_output_dir=True)
```

`modmod.cli.run_generate` does what `modmod generate` does, and
`modmod.patch.render_patch(new_dir, old_dir, patch_file)` writes a patch between
two directories. Errors are raised as `modmod.track.LoadTrackError`,
`modmod.cli.ModModError`, `modmod.patch.GenPatchError` and, for the functions in
`modmod.create`, `modmod.create.CreateError`.

## What it does not do

modmod only writes sources. It does not run mdbook or Slidev: building the book
and the slides, and serving them, is left to those tools.