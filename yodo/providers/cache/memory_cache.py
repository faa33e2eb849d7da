"""In-memory cache provider with read-time TTL checks.

Simple, fast cache for a single-process deployment.  Entries carry only the
time they were written; the reader decides how old is too old, so the feed
and theme domains can share one store with different TTLs.  Can be swapped
for another backend via the ICacheProvider interface.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

import structlog

from yodo.interfaces.cache_provider import ICacheProvider
from yodo.models.cache import CacheStats

logger = structlog.get_logger(logger_name=__name__)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    inserted_at: float

    def is_live(self, now: float, ttl: float) -> bool:
        # Inclusive: an entry read exactly ttl seconds after insertion is a hit.
        return now - self.inserted_at <= ttl


class MemoryCacheProvider(ICacheProvider):
    """Dictionary-backed cache with eviction-on-read.

    Parameters
    ----------
    clock:
        Zero-argument callable returning seconds.  Defaults to
        :func:`time.monotonic`; tests inject a fake clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    def get(self, key: str, ttl: float) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("cache_miss", key=key)
                return None
            now = self._clock()
            if not entry.is_live(now, ttl):
                del self._entries[key]
                logger.debug("cache_expired", key=key, age=round(now - entry.inserted_at, 3))
                return None
        logger.debug("cache_hit", key=key)
        return entry.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())
        logger.debug("cache_set", key=key)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
        logger.debug("cache_invalidate", key=key)

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("cache_clear", count=count)

    def stats(self) -> CacheStats:
        with self._lock:
            keys = sorted(self._entries)
        return CacheStats(size=len(keys), keys=keys)

    def __contains__(self, key: object) -> bool:
        """Presence check that ignores TTL (test and admin helper)."""
        with self._lock:
            return key in self._entries
