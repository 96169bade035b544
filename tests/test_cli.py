import json
from pathlib import Path
from unittest import mock

import pytest

from modmod.cli import ModModError, main, run_generate
from modmod.load import ModuleDef, load_def


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def make_track(root: Path) -> Path:
    _write(root / "track.toml", 'name = "Test Track"\nmodules = ["mods/a/mod.toml"]\n')
    _write(
        root / "mods/a/mod.toml",
        'name = "Basics"\ndescription = "Intro"\n\n[[units]]\n'
        'name = "First Steps"\ntopics = ["topics/hello/topic.toml"]\n',
    )
    topic = root / "mods/a/topics/hello"
    _write(topic / "topic.toml", 'name = "Hello"\nobjectives = ["obj one"]\n')
    _write(topic / "slides.md", "# Hello slide\n")
    return root / "track.toml"


def _slide_files(out: Path) -> list[Path]:
    return [p for p in (out / "slides").glob("*.md")]


def test_generate_renders_track(tmp_path, capsys):
    track = make_track(tmp_path / "content")
    out = tmp_path / "out"
    assert main(["generate", "-o", str(out), str(track)]) == 0
    assert capsys.readouterr().out.strip().endswith("Done!")
    assert 'title = "Test Track"' in (out / "book/book.toml").read_text()
    decks = _slide_files(out)
    assert len(decks) == 1
    assert "theme: teach-rs" in decks[0].read_text()


def test_generate_theme_and_url_base(tmp_path):
    track = make_track(tmp_path / "content")
    out = tmp_path / "out"
    code = main(
        ["generate", "-o", str(out), "--theme", "custom", "--slide-url-base", "/course/", str(track)]
    )
    assert code == 0
    assert "theme: custom" in _slide_files(out)[0].read_text()
    scripts = json.loads((out / "slides/package.json").read_text())["scripts"]
    assert "--base /course/slides/1_1/" in scripts["build-1_1"]


def test_generate_missing_track_reports_error(tmp_path, capsys):
    code = main(["generate", "-o", str(tmp_path / "out"), str(tmp_path / "absent.toml")])
    assert code == 1
    assert "Error rendering track" in capsys.readouterr().err


def test_generate_non_empty_output_needs_clear(tmp_path):
    track = make_track(tmp_path / "content")
    out = tmp_path / "out"
    _write(out / "stale.txt", "old")
    assert main(["generate", "-o", str(out), str(track)]) == 1
    assert main(["generate", "-c", "-o", str(out), str(track)]) == 0
    assert not (out / "stale.txt").exists()


def test_run_generate_raises_mod_mod_error(tmp_path):
    with pytest.raises(ModModError, match="Unable to load track"):
        run_generate(tmp_path / "out", tmp_path / "absent.toml")


def test_run_generate_with_patch(tmp_path):
    track = make_track(tmp_path / "content")
    old = tmp_path / "old"
    old.mkdir()
    patch_file = tmp_path / "update.patch"
    system_tmp = tmp_path / "sys"
    with mock.patch("tempfile.gettempdir", return_value=str(system_tmp)):
        run_generate(old, track, patch_file=patch_file)
    patch = patch_file.read_text()
    assert "+++ b/book/book.toml" in patch
    assert '+title = "Test Track"' in patch
    assert not (system_tmp / "modmod_tmp").exists()
    assert list(old.iterdir()) == []


def test_create_module_and_unit_commands(tmp_path):
    mod_dir = tmp_path / "mod"
    assert main(["create", "module", str(mod_dir), "Basics", "Intro"]) == 0
    assert main(["create", "unit", str(mod_dir / "mod.toml"), "First"]) == 0
    module = load_def(ModuleDef, mod_dir / "mod.toml").data
    assert module.name == "Basics"
    assert [unit.name for unit in module.units] == ["First"]


def test_create_module_force_flag(tmp_path, capsys):
    mod_dir = tmp_path / "mod"
    assert main(["create", "module", str(mod_dir), "Basics", "Intro"]) == 0
    assert main(["create", "module", str(mod_dir), "Other", "Intro"]) == 1
    assert "Error creating content stub" in capsys.readouterr().err
    assert main(["create", "-f", "module", str(mod_dir), "Other", "Intro"]) == 0
    assert load_def(ModuleDef, mod_dir / "mod.toml").data.name == "Other"


def test_create_topic_command(tmp_path):
    mod_dir = tmp_path / "mod"
    main(["create", "module", str(mod_dir), "Basics", "Intro"])
    main(["create", "unit", str(mod_dir / "mod.toml"), "First"])
    code = main(["create", "topic", str(mod_dir / "mod.toml"), "hello", "Hello", "A topic"])
    assert code == 0
    assert (mod_dir / "topics/hello/topic.toml").is_file()
    unit = load_def(ModuleDef, mod_dir / "mod.toml").data.units[0]
    assert unit.topics == [Path("hello") / "mod.toml"]


def test_negative_index_rejected(tmp_path):
    with pytest.raises(SystemExit):
        main(["create", "unit", str(tmp_path / "mod.toml"), "First", "-i", "-1"])