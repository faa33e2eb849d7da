"""Cache key and statistics models.

Every cache key is built from a :class:`CacheDomain` plus an optional
variant discriminator.  The feed domain is keyed by requested batch size
(``feed_15``, ``feed_30``) so a 15-item batch can never satisfy a 30-item
request; the theme domain has a single global key.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CacheDomain(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Logical categories of cached data, each with its own TTL policy."""

    THEME = "theme"
    FEED = "feed"


class CacheKey(BaseModel):
    """A domain-scoped cache key.

    ``str(key)`` is the store-level key: the domain value alone, or
    ``<domain>_<variant>`` when a variant is present.
    """

    model_config = ConfigDict(frozen=True)

    domain: CacheDomain
    variant: str | None = None

    @classmethod
    def theme(cls) -> CacheKey:
        return cls(domain=CacheDomain.THEME)

    @classmethod
    def feed(cls, limit: int) -> CacheKey:
        return cls(domain=CacheDomain.FEED, variant=str(limit))

    def __str__(self) -> str:
        if self.variant is None or self.variant == "":
            return self.domain.value
        return f"{self.domain.value}_{self.variant}"


class CacheStats(BaseModel):
    """Snapshot of the cache store contents (admin/debug view)."""

    model_config = ConfigDict(frozen=True)

    size: int = 0
    keys: list[str] = Field(default_factory=list)
