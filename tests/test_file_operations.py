import os
from pathlib import Path

import pytest

from border_crop.ops import file_operations
from border_crop.ops.file_operations import (
    copy_file,
    discard_file,
    generate_unique_filename,
    move_file,
)


def test_move_replaces_target(tmp_path: Path):
    src = tmp_path / "tmp.jpg"
    src.write_bytes(b"new")
    target = tmp_path / "out.jpg"
    target.write_bytes(b"old")

    result = move_file(str(src), str(target))

    assert Path(result) == target.resolve()
    assert target.read_bytes() == b"new"
    assert not src.exists()


def test_move_falls_back_to_copy_and_delete(tmp_path: Path, monkeypatch):
    src = tmp_path / "tmp.jpg"
    src.write_bytes(b"data")
    target = tmp_path / "out.jpg"

    def _cross_device(a, b):
        raise OSError(18, "Invalid cross-device link")

    monkeypatch.setattr(file_operations.os, "replace", _cross_device)

    move_file(str(src), str(target))

    assert target.read_bytes() == b"data"
    assert not src.exists()


def test_move_missing_source_raises(tmp_path: Path):
    with pytest.raises(OSError):
        move_file(str(tmp_path / "missing.jpg"), str(tmp_path / "out.jpg"))


def test_copy_file(tmp_path: Path):
    src = tmp_path / "a.png"
    src.write_bytes(b"abc")

    target = copy_file(str(src), str(tmp_path / "b.png"))

    assert Path(target).read_bytes() == b"abc"
    assert src.exists()


def test_generate_unique_filename(tmp_path: Path):
    assert generate_unique_filename(str(tmp_path), "x.jpg") == str(tmp_path / "x.jpg")

    (tmp_path / "x.jpg").write_bytes(b"")
    (tmp_path / "x (1).jpg").write_bytes(b"")

    assert generate_unique_filename(str(tmp_path), "x.jpg") == str(tmp_path / "x (2).jpg")


def test_discard_file(tmp_path: Path):
    path = tmp_path / "gone.txt"
    path.write_text("x", encoding="utf-8")

    discard_file(str(path))
    assert not path.exists()

    discard_file(str(path))
    discard_file(None)
    assert not os.path.exists(path)
