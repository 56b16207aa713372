"""Streaming ZIP export of user-selected files and directories."""

from __future__ import annotations

import logging
import posixpath
import stat
import zipfile
from datetime import datetime
from typing import Iterable, Iterator

from weblist.exceptions import PathNotFoundError
from weblist.services.path_resolver import PathResolver
from weblist.services.tree_walker import walk_tree

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024  # 64 KB


class _ChunkSink:
    """Write-only, non-seekable target that hands written bytes back out.

    ``zipfile`` detects the missing ``tell``/``seek`` and falls back to data
    descriptors, so entries can be emitted without ever rewinding.
    """

    def __init__(self) -> None:
        self._buf = bytearray()

    def write(self, data: bytes) -> int:
        self._buf += data
        return len(data)

    def flush(self) -> None:
        pass

    def drain(self) -> bytes:
        data = bytes(self._buf)
        self._buf.clear()
        return data


def archive_name(now: datetime | None = None) -> str:
    return f"weblist-files-{(now or datetime.now()).strftime('%Y%m%d-%H%M%S')}.zip"


class ArchiveExporter:
    """Best-effort ZIP writer: a member that cannot be added is logged and skipped."""

    def __init__(self, resolver: PathResolver):
        self._resolver = resolver

    def export(self, selected_paths: Iterable[str]) -> Iterator[bytes]:
        """Yield the archive incrementally.

        Selected files are stored under their base name. A selected directory
        contributes its contents relative to itself: one entry per
        subdirectory (empty ones included, each written before its children)
        and one per non-excluded file.
        """
        sink = _ChunkSink()
        zf = zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED)
        try:
            for raw in selected_paths:
                path = self._resolver.resolve(raw)
                if self._resolver.is_excluded(path):
                    logger.warning("Skipping excluded file in ZIP: %s", path)
                    continue

                try:
                    st = self._resolver.stat(path)
                except PathNotFoundError:
                    logger.error("File not found for ZIP: %s", path)
                    continue

                if stat.S_ISDIR(st.st_mode):
                    yield from self._add_directory(zf, sink, path)
                else:
                    yield from self._add_file(zf, sink, path, posixpath.basename(path))
        finally:
            zf.close()

        tail = sink.drain()
        if tail:
            yield tail

    def _add_directory(self, zf: zipfile.ZipFile, sink: _ChunkSink, path: str) -> Iterator[bytes]:
        for node in walk_tree(self._resolver, path):
            if node.is_dir:
                try:
                    zf.writestr(node.relative + "/", b"")
                except (OSError, ValueError) as e:
                    logger.warning("Failed to create directory in ZIP: %s: %s", node.relative, e)
                    continue
                chunk = sink.drain()
                if chunk:
                    yield chunk
            else:
                yield from self._add_file(zf, sink, node.path, node.relative)

    def _add_file(self, zf: zipfile.ZipFile, sink: _ChunkSink, path: str, arcname: str) -> Iterator[bytes]:
        full = self._resolver.full_path(path)
        try:
            src = open(full, "rb")
        except OSError as e:
            logger.warning("Failed to add file to ZIP: %s: %s", path, e)
            return

        with src:
            try:
                info = zipfile.ZipInfo.from_file(full, arcname, strict_timestamps=False)
                info.compress_type = zipfile.ZIP_DEFLATED
                with zf.open(info, mode="w") as dest:
                    while chunk := src.read(CHUNK_SIZE):
                        dest.write(chunk)
                        out = sink.drain()
                        if out:
                            yield out
            except (OSError, ValueError, zipfile.LargeZipFile) as e:
                logger.warning("Failed to write file to ZIP: %s: %s", path, e)

        out = sink.drain()
        if out:
            yield out
