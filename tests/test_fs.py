from __future__ import annotations

from pathlib import Path

import pytest

from scriptext.errors import Report
from scriptext.fs import File, ls, read_bytes, read_to_string, write_file

pytestmark = pytest.mark.unit


def test_file_not_found(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(Report) as exc_info:
        File.open("wont-exist.txt")

    report = exc_info.value
    assert str(report) == "failed to open file 'wont-exist.txt'"
    assert isinstance(report.root_cause, FileNotFoundError)
    assert "No such file or directory" in report.summary


def test_create_makes_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "out.txt"

    with File.create(target) as f:
        f.write("hello ")
        f.write(b"world")
        assert f.path == target

    assert target.read_text() == "hello world"


def test_create_truncates_and_append_appends(tmp_path: Path) -> None:
    target = tmp_path / "log.txt"
    write_file(target, "old contents")
    write_file(target, "one\n")

    with File.append(target) as f:
        f.write("two\n")

    assert read_to_string(target) == "one\ntwo\n"


def test_read_text_rejects_invalid_utf8(tmp_path: Path) -> None:
    target = tmp_path / "bin.dat"
    target.write_bytes(b"\xff\xfe\x00")

    with File.open(target) as f, pytest.raises(Report) as exc_info:
        f.read_text()

    assert str(exc_info.value) == f"failed to encode bytes from '{target}' as UTF8"
    assert isinstance(exc_info.value.root_cause, UnicodeDecodeError)


def test_reading_advances_cursor_and_seek_rewinds(tmp_path: Path) -> None:
    target = tmp_path / "data.txt"
    target.write_text("abc")

    with File.open(target) as f:
        assert f.read_bytes() == b"abc"
        assert f.read_bytes() == b""
        f.seek(1)
        assert f.read_text() == "bc"


def test_into_raw_flushes(tmp_path: Path) -> None:
    target = tmp_path / "raw.txt"
    f = File.create(target)
    f.write("buffered")

    raw = f.into_raw()

    assert target.read_text() == "buffered"
    raw.close()


def test_exists_and_read_bytes(tmp_path: Path) -> None:
    target = tmp_path / "x.bin"
    assert not File.exists(target)
    target.write_bytes(b"\x00\x01")
    assert File.exists(target)
    assert read_bytes(target) == b"\x00\x01"


def test_ls_filters_by_glob_and_sorts(tmp_path: Path) -> None:
    for name in ("b.rs", "a.rs", "c.py", "notes.txt"):
        (tmp_path / name).write_text("")
    (tmp_path / "sub").mkdir()

    assert ls(tmp_path, "*.rs") == [tmp_path / "a.rs", tmp_path / "b.rs"]
    assert ls(tmp_path) == sorted(tmp_path.iterdir())


def test_ls_missing_directory_reports(tmp_path: Path) -> None:
    with pytest.raises(Report) as exc_info:
        ls(tmp_path / "missing", "*.csv")

    assert str(exc_info.value).startswith("failed to read directory: ")
    assert isinstance(exc_info.value.root_cause, FileNotFoundError)
