"""Tests for streaming ZIP export."""

import io
import zipfile
from datetime import datetime

import pytest

from weblist.services.archive_exporter import ArchiveExporter, archive_name


def _zip(chunks) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(b"".join(chunks)))


@pytest.fixture
def exporter(resolver):
    return ArchiveExporter(resolver)


def test_archive_name():
    assert archive_name(datetime(2024, 3, 5, 7, 8, 9)) == "weblist-files-20240305-070809.zip"


def test_file_and_directory_selection(exporter):
    zf = _zip(exporter.export(["file1.txt", "dir1"]))
    names = zf.namelist()
    assert set(names) == {"file1.txt", "file3.txt", "subdir/", "subdir/file4.txt"}
    assert names.index("subdir/") < names.index("subdir/file4.txt")
    assert zf.read("subdir/file4.txt") == b"file four\n"
    assert zf.testzip() is None


def test_streams_in_several_chunks(exporter):
    chunks = list(exporter.export(["file1.txt", "dir1"]))
    assert len(chunks) > 1
    assert all(chunks)


def test_excluded_selection_skipped(exporter):
    zf = _zip(exporter.export([".git", "file1.txt"]))
    assert zf.namelist() == ["file1.txt"]


def test_excluded_descendants_skipped(exporter, root):
    (root / "dir1" / ".git").mkdir()
    (root / "dir1" / ".git" / "HEAD").write_text("ref")
    names = _zip(exporter.export(["dir1"])).namelist()
    assert not any(".git" in n for n in names)


def test_missing_selection_skipped(exporter):
    zf = _zip(exporter.export(["missing.txt", "file1.txt"]))
    assert zf.namelist() == ["file1.txt"]


def test_traversal_selection_stays_in_root(exporter):
    zf = _zip(exporter.export(["../../etc/passwd", "../file1.txt"]))
    assert zf.namelist() == ["file1.txt"]


def test_empty_subdirectory_kept(exporter, root):
    (root / "dir1" / "empty").mkdir()
    assert "empty/" in _zip(exporter.export(["dir1"])).namelist()


def test_unreadable_file_skipped(exporter, root, monkeypatch):
    real_open = open

    def failing_open(path, *args, **kwargs):
        if str(path).endswith("file3.txt"):
            raise PermissionError("denied")
        return real_open(path, *args, **kwargs)

    monkeypatch.setattr("builtins.open", failing_open)
    names = _zip(exporter.export(["dir1"])).namelist()
    assert "file3.txt" not in names
    assert "subdir/file4.txt" in names


def test_nothing_exportable_is_still_a_valid_zip(exporter):
    assert _zip(exporter.export(["missing"])).namelist() == []
