from pathlib import Path

import pytest

from modmod.patch import GenPatchError, render_patch


def _dirs(tmp_path: Path) -> tuple[Path, Path]:
    new = tmp_path / "new"
    old = tmp_path / "old"
    new.mkdir()
    old.mkdir()
    return new, old


def test_identical_files_give_empty_patch(tmp_path, capsys):
    new, old = _dirs(tmp_path)
    (new / "f.txt").write_text("same\n", encoding="utf-8")
    (old / "f.txt").write_text("same\n", encoding="utf-8")
    patch = tmp_path / "out.patch"
    render_patch(new, old, patch)
    assert patch.read_bytes() == b""
    assert "are the same" in capsys.readouterr().out


def test_changed_file_is_diffed(tmp_path):
    new, old = _dirs(tmp_path)
    (new / "f.txt").write_text("a\nnew\nc\n", encoding="utf-8")
    (old / "f.txt").write_text("a\nold\nc\n", encoding="utf-8")
    patch = tmp_path / "out.patch"
    render_patch(new, old, patch)
    lines = patch.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "--- a/f.txt"
    assert lines[1] == "+++ b/f.txt"
    assert lines[2] == "@@ -1,3 +1,3 @@"
    assert "-old" in lines
    assert "+new" in lines
    assert " a" in lines


def test_missing_old_file_adds_all_lines(tmp_path, capsys):
    new, old = _dirs(tmp_path)
    sub = new / "src"
    sub.mkdir()
    (sub / "main.rs").write_text("x\ny\n", encoding="utf-8")
    patch = tmp_path / "out.patch"
    render_patch(new, old, patch)
    text = patch.read_text(encoding="utf-8")
    assert "--- a/src/main.rs\n+++ b/src/main.rs\n" in text
    assert "+x\n+y\n" in text
    assert "File not found at" in capsys.readouterr().out


def test_missing_trailing_newline_is_marked(tmp_path):
    new, old = _dirs(tmp_path)
    (new / "f.txt").write_text("one", encoding="utf-8")
    (old / "f.txt").write_text("two", encoding="utf-8")
    patch = tmp_path / "out.patch"
    render_patch(new, old, patch)
    text = patch.read_text(encoding="utf-8")
    assert "-two\n\\ No newline at end of file\n" in text
    assert "+one\n\\ No newline at end of file\n" in text


def test_binary_files_are_diffed_as_bytes(tmp_path):
    new, old = _dirs(tmp_path)
    (new / "b.bin").write_bytes(b"\xff\xfe\n")
    (old / "b.bin").write_bytes(b"\xff\x00\n")
    patch = tmp_path / "out.patch"
    render_patch(new, old, patch)
    data = patch.read_bytes()
    assert data.startswith(b"--- a/b.bin\n+++ b/b.bin\n")
    assert b"+\xff\xfe\n" in data
    assert b"-\xff\x00\n" in data


def test_files_only_in_old_are_ignored(tmp_path):
    new, old = _dirs(tmp_path)
    (old / "gone.txt").write_text("bye\n", encoding="utf-8")
    patch = tmp_path / "out.patch"
    render_patch(new, old, patch)
    assert patch.read_bytes() == b""


def test_missing_new_dir_is_an_error(tmp_path):
    with pytest.raises(GenPatchError):
        render_patch(tmp_path / "nope", tmp_path, tmp_path / "out.patch")