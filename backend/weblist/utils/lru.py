"""Thread-safe bounded LRU cache with an injectable backing store."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Callable, Generic, Hashable, MutableMapping, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class LRUCache(Generic[K, V]):
    """Least-recently-used cache holding at most ``capacity`` entries.

    The backing store defaults to an ``OrderedDict``; any mutable mapping that
    preserves insertion order can be injected instead (tests use a plain dict
    to inspect contents). Recency is maintained by re-inserting a key on every
    hit, so the first key in the store is always the eviction candidate.

    The lock only guards store bookkeeping. ``get_or_load`` runs the loader
    outside the lock, so two concurrent misses on one key may both load; the
    last write wins, which is harmless for pure loaders.
    """

    def __init__(self, capacity: int, store: Optional[MutableMapping[K, V]] = None):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._store: MutableMapping[K, V] = store if store is not None else OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: K) -> bool:
        with self._lock:
            return key in self._store

    def get(self, key: K, default: Any = None) -> Any:
        with self._lock:
            if key not in self._store:
                self.misses += 1
                return default
            value = self._store.pop(key)
            self._store[key] = value
            self.hits += 1
            return value

    def put(self, key: K, value: V) -> None:
        with self._lock:
            if key in self._store:
                self._store.pop(key)
            self._store[key] = value
            while len(self._store) > self._capacity:
                oldest = next(iter(self._store))
                del self._store[oldest]

    def get_or_load(self, key: K, loader: Callable[[], V]) -> V:
        """Return the cached value for ``key``, calling ``loader`` on a miss."""
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        value = loader()
        self.put(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self.hits = 0
            self.misses = 0
