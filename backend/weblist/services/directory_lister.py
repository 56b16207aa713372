"""Directory listing: enumeration, exclusion, recursive mtime and ordering."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Optional

from weblist.exceptions import BadRequestError, PathNotFoundError
from weblist.models.file_info import PARENT_NAME, FileInfo
from weblist.services.binary_detector import BinaryDetector
from weblist.services.path_resolver import ROOT, PathResolver, join_path, parent_path
from weblist.services.tree_walker import scan_directory, walk_tree

logger = logging.getLogger(__name__)


class SortField(str, Enum):
    NAME = "name"
    SIZE = "size"
    DATE = "date"

    @classmethod
    def parse(cls, value: "str | SortField | None") -> "SortField":
        """Unknown or empty values fall back to NAME."""
        try:
            return cls(value)
        except ValueError:
            return cls.NAME


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: "str | SortDirection | None") -> "SortDirection":
        try:
            return cls(value)
        except ValueError:
            return cls.ASC


def _mtime(ts: float) -> datetime:
    return datetime.fromtimestamp(ts).astimezone()


def _name_key(f: FileInfo) -> str:
    return f.name.lower()


def _date_key(f: FileInfo) -> float:
    return f.last_modified.timestamp() if f.last_modified else 0.0


def _size_key(f: FileInfo) -> int:
    return f.size


_SORT_KEYS = {
    SortField.NAME: _name_key,
    SortField.DATE: _date_key,
    SortField.SIZE: _size_key,
}


def sort_files(
    files: list[FileInfo],
    sort_by: "SortField | str",
    sort_dir: "SortDirection | str" = SortDirection.ASC,
) -> None:
    """Order ``files`` in place.

    ``..`` always leads, directories precede files, and ties keep their
    enumeration order. When sorting by size, directories are ordered by name
    ascending whatever the direction; otherwise both groups honour the field
    and direction.
    """
    field = SortField.parse(sort_by)
    descending = SortDirection.parse(sort_dir) is SortDirection.DESC

    parents = [f for f in files if f.is_parent]
    dirs = [f for f in files if f.is_dir and not f.is_parent]
    regular = [f for f in files if not f.is_dir and not f.is_parent]

    if field is SortField.SIZE:
        dirs.sort(key=_name_key)
    else:
        dirs.sort(key=_SORT_KEYS[field], reverse=descending)
    regular.sort(key=_SORT_KEYS[field], reverse=descending)

    files[:] = parents + dirs + regular


class DirectoryLister:
    """Builds the ordered ``FileInfo`` list for one directory."""

    def __init__(self, resolver: PathResolver, detector: BinaryDetector, recursive_mtime: bool = False):
        self._resolver = resolver
        self._detector = detector
        self._recursive_mtime = recursive_mtime

    def list(
        self,
        dir_path: str,
        sort_by: "SortField | str" = SortField.NAME,
        sort_dir: "SortDirection | str" = SortDirection.ASC,
    ) -> list[FileInfo]:
        try:
            entries = scan_directory(self._resolver, dir_path)
        except FileNotFoundError as e:
            raise PathNotFoundError(f"directory not found: {dir_path}") from e
        except NotADirectoryError as e:
            raise BadRequestError("not a directory") from e
        except ValueError as e:
            # embedded NUL byte
            raise PathNotFoundError(f"directory not found: {dir_path}") from e

        files: list[FileInfo] = []
        if dir_path != ROOT:
            files.append(self._parent_entry(dir_path))

        for entry in entries:
            entry_path = join_path(dir_path, entry.name)
            if self._resolver.is_excluded(entry_path):
                continue

            try:
                info = entry.stat()
                is_dir = entry.is_dir()
            except OSError as e:
                logger.warning("Failed to get info for %s: %s", entry_path, e)
                continue

            last_modified = _mtime(info.st_mtime)
            if is_dir and self._recursive_mtime:
                newest = self.recursive_mtime(entry_path)
                if newest is not None:
                    last_modified = newest

            files.append(FileInfo(
                name=entry.name,
                path=entry_path,
                is_dir=is_dir,
                size=info.st_size,
                last_modified=last_modified,
                binary_probe=partial(self._detector.classify, entry_path, info.st_mtime_ns, is_dir),
            ))

        sort_files(files, sort_by, sort_dir)
        return files

    def _parent_entry(self, dir_path: str) -> FileInfo:
        parent = parent_path(dir_path)
        # an unreadable parent keeps last_modified unset rather than guessed
        try:
            last_modified = _mtime(self._resolver.stat(parent).st_mtime)
        except PathNotFoundError:
            last_modified = None
        return FileInfo(name=PARENT_NAME, path=parent, is_dir=True, last_modified=last_modified)

    def recursive_mtime(self, path: str) -> Optional[datetime]:
        """Newest mtime of any non-excluded file below ``path``.

        Returns ``None`` when no file contributes: empty or fully excluded
        subtrees, and paths that do not exist.
        """
        newest: Optional[float] = None
        for node in walk_tree(self._resolver, path):
            if node.is_dir:
                continue
            try:
                mtime = node.stat().st_mtime
            except OSError:
                continue
            if newest is None or mtime > newest:
                newest = mtime
        return _mtime(newest) if newest is not None else None
