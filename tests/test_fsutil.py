from pathlib import Path

import pytest

from modmod.fsutil import (
    FileOperationError,
    copy_file,
    copy_files,
    create_dir_all,
    create_file,
    get_dir_files,
    read_to_string,
    try_create_file,
)


def test_create_dir_all_makes_nested_dirs(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    create_dir_all(target)
    create_dir_all(target)
    assert target.is_dir()


def test_create_dir_all_over_file_fails(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(FileOperationError):
        create_dir_all(blocker / "sub")


def test_read_to_string_round_trip(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("héllo\nworld", encoding="utf-8")
    assert read_to_string(path) == "héllo\nworld"


def test_read_missing_file_fails(tmp_path):
    with pytest.raises(FileOperationError, match="Error reading file"):
        read_to_string(tmp_path / "missing.txt")


def test_try_create_file_refuses_existing_without_force(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("keep")
    with pytest.raises(FileOperationError, match="already exists"):
        try_create_file(path, False)
    assert path.read_text() == "keep"


def test_try_create_file_with_force_truncates(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("old content")
    with try_create_file(path, True) as handle:
        handle.write("new")
    assert path.read_text() == "new"


def test_create_file_creates_new_file(tmp_path):
    path = tmp_path / "fresh.md"
    with create_file(path) as handle:
        handle.write("line\n")
    assert read_to_string(path) == "line\n"


def test_get_dir_files_is_recursive_and_sorted(tmp_path):
    (tmp_path / "sub" / "deeper").mkdir(parents=True)
    files = [tmp_path / "b.txt", tmp_path / "sub" / "a.txt", tmp_path / "sub" / "deeper" / "c.txt"]
    for file in files:
        file.write_text("x")
    found = get_dir_files(tmp_path)
    assert found == sorted(files)
    assert all(isinstance(p, Path) and p.is_file() for p in found)


def test_get_dir_files_missing_dir_fails(tmp_path):
    with pytest.raises(FileOperationError):
        get_dir_files(tmp_path / "nope")


def test_copy_file_copies_content(tmp_path):
    src = tmp_path / "src.bin"
    src.write_bytes(b"\x00\x01data")
    dest = tmp_path / "dest.bin"
    copy_file(src, dest)
    assert dest.read_bytes() == src.read_bytes()


def test_copy_file_missing_source_fails(tmp_path):
    with pytest.raises(FileOperationError, match="Error copying file"):
        copy_file(tmp_path / "missing", tmp_path / "dest")


def test_copy_files_keeps_names(tmp_path):
    src_dir = tmp_path / "src"
    src_dir.mkdir()
    (src_dir / "one.svg").write_text("1")
    (src_dir / "two.png").write_text("2")
    dest = tmp_path / "dest"
    dest.mkdir()
    copy_files([src_dir / "one.svg", str(src_dir / "two.png")], dest)
    assert sorted(p.name for p in dest.iterdir()) == ["one.svg", "two.png"]
    assert (dest / "two.png").read_text() == "2"