"""Root-confined path cleaning and exclusion matching."""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from typing import Iterable

from weblist.exceptions import AccessDeniedError, PathNotFoundError

logger = logging.getLogger(__name__)

ROOT = "."


def clean_path(raw: str | None) -> str:
    """Normalize an untrusted request path into a root-relative path.

    Backslashes become forward slashes and the path is cleaned lexically as if
    rooted at ``/``, so ``..`` segments can never climb above the root and any
    leading slash is dropped. Empty input maps to the root (``"."``).
    """
    if not raw:
        return ROOT
    cleaned = posixpath.normpath("/" + raw.replace("\\", "/"))
    cleaned = cleaned.lstrip("/")
    return cleaned or ROOT


def join_path(parent: str, name: str) -> str:
    if parent == ROOT:
        return name
    return f"{parent}/{name}"


def parent_path(path: str) -> str:
    return posixpath.dirname(path) or ROOT


class PathResolver:
    """Maps request paths onto the served root and applies exclusion rules."""

    def __init__(self, root_dir: str | Path, exclude: Iterable[str] = ()):
        self._root = Path(root_dir)
        self._patterns = tuple(p.replace("\\", "/") for p in exclude if p)
        if self._patterns:
            logger.info("Excluding %d pattern(s): %s", len(self._patterns), ", ".join(self._patterns))

    @property
    def root(self) -> Path:
        return self._root

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def resolve(self, raw: str | None) -> str:
        return clean_path(raw)

    def is_excluded(self, path: str) -> bool:
        """True if ``path`` equals a pattern, contains it as a component, or ends with ``/pattern``."""
        if not self._patterns:
            return False

        normalized = path.replace("\\", "/")
        parts = normalized.split("/")
        for pattern in self._patterns:
            if normalized == pattern:
                return True
            if pattern in parts:
                return True
            if normalized.endswith("/" + pattern):
                return True
        return False

    def ensure_allowed(self, path: str) -> str:
        if self.is_excluded(path):
            logger.warning("Access denied to excluded path: %s", path)
            raise AccessDeniedError(f"access denied: {posixpath.basename(path) or path}")
        return path

    def resolve_allowed(self, raw: str | None) -> str:
        """Clean ``raw`` and reject it if excluded. Handlers enter through here."""
        return self.ensure_allowed(self.resolve(raw))

    def full_path(self, path: str) -> Path:
        """Filesystem location for a cleaned, root-relative path."""
        if path == ROOT:
            return self._root
        return self._root / path

    def stat(self, path: str) -> os.stat_result:
        try:
            return os.stat(self.full_path(path))
        except (OSError, ValueError) as exc:
            raise PathNotFoundError(f"path not found: {path}") from exc
