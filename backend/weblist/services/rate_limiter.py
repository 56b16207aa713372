"""Per-address token buckets for login submissions and general requests."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    tokens: float
    updated: float


class RateLimiter:
    """Token bucket per source key with inactivity expiry.

    Each key starts with ``burst`` tokens and regains ``rate`` tokens per
    second up to ``burst``. A bucket untouched for ``ttl_seconds`` is dropped,
    so the key starts over full and memory stays bounded by active sources.
    """

    def __init__(
        self,
        rate: float = 5.0,
        burst: int = 5,
        ttl_seconds: float = 600.0,
        clock: Callable[[], float] = time.monotonic,
        name: str = "login",
    ):
        self.name = name
        self._rate = rate
        self._burst = burst
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: Dict[str, _Bucket] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            self._sweep(now)

            bucket = self._buckets.get(key)
            if bucket is None or now - bucket.updated > self._ttl:
                bucket = _Bucket(tokens=float(self._burst), updated=now)
                self._buckets[key] = bucket
            else:
                elapsed = max(0.0, now - bucket.updated)
                bucket.tokens = min(float(self._burst), bucket.tokens + elapsed * self._rate)
                bucket.updated = now

            if bucket.tokens >= 1.0:
                bucket.tokens -= 1.0
                return True

        logger.warning("Rate limit (%s) exceeded for %s", self.name, key)
        return False

    def _sweep(self, now: float) -> None:
        """Drop expired buckets, at most once per TTL window. Caller holds the lock."""
        if now - self._last_sweep < self._ttl:
            return
        expired = [k for k, b in self._buckets.items() if now - b.updated > self._ttl]
        for k in expired:
            del self._buckets[k]
        self._last_sweep = now
