"""Optional uploads into directories under the served root."""

from __future__ import annotations

import logging
import os
import posixpath
import shutil
from pathlib import Path
from typing import BinaryIO

from weblist.exceptions import AccessDeniedError, BadRequestError, ConflictError
from weblist.services.path_resolver import PathResolver, clean_path

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024  # 64 KB


class UploadService:
    """Validates upload targets and writes files without escaping the root."""

    def __init__(self, resolver: PathResolver, overwrite: bool = False):
        self._resolver = resolver
        self._overwrite = overwrite

    def validate_target(self, raw: str | None) -> str:
        """Return the cleaned target directory, or raise with the matching status."""
        raw = (raw or ".").replace("\\", "/")
        if posixpath.isabs(raw):
            raise BadRequestError("absolute paths are not allowed")

        if ".." in posixpath.normpath(raw):
            raise BadRequestError("path traversal is not allowed")
        path = clean_path(raw)

        if self._resolver.is_excluded(path):
            raise AccessDeniedError("access denied to target directory")

        target = self._resolver.full_path(path)
        if not target.exists():
            raise BadRequestError(f"target directory does not exist: {path}")
        if not target.is_dir():
            raise BadRequestError("target path is not a directory")

        real_target = Path(os.path.realpath(target))
        real_root = Path(os.path.realpath(self._resolver.root))
        if real_target != real_root and real_root not in real_target.parents:
            raise BadRequestError("path traversal is not allowed")

        return path

    @staticmethod
    def validate_filename(name: str | None) -> str:
        if not name:
            raise BadRequestError("invalid filename: filename is empty")
        if ".." in name:
            raise BadRequestError(f"invalid filename {name!r}: contains '..'")
        if "/" in name or "\\" in name:
            raise BadRequestError(f"invalid filename {name!r}: contains path separator")
        return name

    def save(self, target: str, filename: str, src: BinaryIO) -> Path:
        """Write ``src`` to ``target/filename``.

        Without overwrite the file is created exclusively, so an existing name
        is a conflict and a failed write removes only what this call created.
        With overwrite, a symlink at the destination is refused.
        """
        dest = self._resolver.full_path(target) / self.validate_filename(filename)

        if self._overwrite:
            if dest.is_symlink():
                raise BadRequestError(f"refusing to overwrite symlink: {filename}")
            flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
        else:
            flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL

        try:
            fd = os.open(dest, flags, 0o644)
        except FileExistsError:
            raise ConflictError(f"file {filename!r} already exists")

        try:
            with os.fdopen(fd, "wb") as out:
                shutil.copyfileobj(src, out, CHUNK_SIZE)
        except OSError:
            if not self._overwrite:
                dest.unlink(missing_ok=True)
            raise

        logger.info("Uploaded file %r to %s", filename, dest)
        return dest
