"""Text-vs-binary classification with a bounded (path, mtime) cache."""

from __future__ import annotations

import logging
from typing import Optional

from weblist.services.path_resolver import PathResolver
from weblist.utils.content_types import SNIFF_LEN, looks_binary, should_sniff
from weblist.utils.lru import LRUCache

logger = logging.getLogger(__name__)

CacheKey = tuple[str, int]


class BinaryDetector:
    """Sniffs file prefixes to decide whether a text-looking file is really binary.

    Verdicts are memoized by ``(path, mtime_ns)``: a file whose modification
    time changed is always a new key and gets re-read. Passing ``cache=None``
    disables memoization without changing any verdict.
    """

    def __init__(self, resolver: PathResolver, cache: Optional[LRUCache[CacheKey, bool]] = None):
        self._resolver = resolver
        self._cache = cache

    @property
    def cache(self) -> Optional[LRUCache[CacheKey, bool]]:
        return self._cache

    def classify(self, path: str, mod_time_ns: int, is_dir: bool = False) -> bool:
        if is_dir:
            return False
        if not should_sniff(path):
            return False
        if self._cache is None:
            return self._sniff(path)
        return self._cache.get_or_load((path, mod_time_ns), lambda: self._sniff(path))

    def _sniff(self, path: str) -> bool:
        try:
            with open(self._resolver.full_path(path), "rb") as f:
                head = f.read(SNIFF_LEN)
        except OSError as e:
            logger.debug("Binary sniff failed for %s: %s", path, e)
            return False
        return looks_binary(head)
