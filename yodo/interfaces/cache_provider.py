"""Abstract base class for cache store providers.

Defines the contract for the read-through response cache that sits between
the route layer and the expensive upstream calls (content fetch and
generative-model calls).  The adapter pattern keeps the store swappable
without touching orchestration code.

Unlike most provider contracts in this package, the cache contract is
synchronous: a cache read or write is pure bookkeeping and must never be a
suspension point relative to the adapter calls it guards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from yodo.models.cache import CacheStats


class ICacheProvider(ABC):
    """Contract for key-value stores with read-time TTL checks.

    The TTL is a parameter of the *read*, not of the entry, so different
    call sites (feed vs. theme) can apply different staleness tolerances
    to a single generic store.
    """

    @abstractmethod
    def get(self, key: str, ttl: float) -> Any | None:
        """Return the value stored under *key* if it is still live.

        Parameters
        ----------
        key:
            The cache key to look up.
        ttl:
            Maximum age in seconds.  An entry whose age equals *ttl* is
            still live; an older entry is deleted and reported as a miss.

        Returns
        -------
        Any or None
            The cached value, or ``None`` on a miss.  Never raises.
        """

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, overwriting unconditionally.

        The entry is stamped with the current time.  Never raises.
        """

    @abstractmethod
    def invalidate(self, key: str) -> None:
        """Remove the entry stored under *key* (no-op if absent)."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""

    @abstractmethod
    def stats(self) -> CacheStats:
        """Return the current entry count and keys."""
