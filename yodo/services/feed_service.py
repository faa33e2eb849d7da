"""Read-through orchestration for the feed and theme domains.

Owns the keying policy: which cache key each request maps to, which TTL
applies to it, and what is stored on a miss.  Two independent domains share
one cache store:

    theme         -- one global entry, ``theme_ttl_seconds``
    feed_<limit>  -- one entry per requested batch size, ``feed_ttl_seconds``

A feed entry holds the already-enhanced batch, so a hit costs neither a
content fetch nor a model call.  Concurrent misses on the same key are
serialized by a per-key ``asyncio.Lock``; whoever waits re-reads the cache
once it gets the lock, so only one upstream call pair runs per key.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from yodo.config.settings import Settings
from yodo.interfaces.cache_provider import ICacheProvider
from yodo.interfaces.content_provider import IContentProvider
from yodo.models.cache import CacheKey
from yodo.models.content import EnhancedItem
from yodo.models.theme import VisualTheme
from yodo.services.enhancement_service import EnhancementService
from yodo.utils.errors import EmptyFeedError, InvalidLimitError
from yodo.utils.logging import get_logger


@dataclass(frozen=True)
class ThemeResult:
    theme: VisualTheme
    cached: bool


@dataclass(frozen=True)
class FeedResult:
    items: list[EnhancedItem]
    cached: bool

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass
class RefreshResult:
    """Outcome of a refresh; either half may be missing with an error recorded."""

    feed: FeedResult | None = None
    theme: ThemeResult | None = None
    errors: dict[str, str] = field(default_factory=dict)


class FeedService:
    """Serves feed batches and themes through the shared TTL cache."""

    def __init__(
        self,
        cache: ICacheProvider,
        content_provider: IContentProvider,
        enhancement_service: EnhancementService,
        settings: Settings,
    ) -> None:
        self._cache = cache
        self._content = content_provider
        self._enhancer = enhancement_service
        self._feed_ttl = settings.feed_ttl_seconds
        self._theme_ttl = settings.theme_ttl_seconds
        self._default_limit = settings.feed_default_limit
        self._max_limit = settings.feed_max_limit
        self._locks: dict[str, asyncio.Lock] = {}
        self._logger = get_logger(__name__)

    @property
    def max_limit(self) -> int:
        return self._max_limit

    def resolve_limit(self, limit: int | None) -> int:
        """Return the batch size to key on, or raise for one out of range.

        The requested size is never adjusted: every accepted size owns its
        own ``feed_<limit>`` entry.

        Raises
        ------
        InvalidLimitError
            If *limit* is outside ``[1, feed_max_limit]``.
        """
        if limit is None:
            return self._default_limit
        if not 1 <= limit <= self._max_limit:
            raise InvalidLimitError(f"limit must be between 1 and {self._max_limit}, got {limit}")
        return limit

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    # ------------------------------------------------------------------
    # Theme domain
    # ------------------------------------------------------------------

    async def get_theme(self) -> ThemeResult:
        key = str(CacheKey.theme())
        cached = self._cache.get(key, self._theme_ttl)
        if cached is not None:
            return ThemeResult(theme=cached, cached=True)

        async with self._lock_for(key):
            cached = self._cache.get(key, self._theme_ttl)
            if cached is not None:
                return ThemeResult(theme=cached, cached=True)

            theme = await self._enhancer.generate_theme()
            self._cache.set(key, theme)
            self._logger.info("theme_generated", key=key, mood=theme.mood)
            return ThemeResult(theme=theme, cached=False)

    # ------------------------------------------------------------------
    # Feed domain
    # ------------------------------------------------------------------

    async def get_feed(self, limit: int | None = None) -> FeedResult:
        """Return an enhanced batch for *limit*.

        Raises
        ------
        EmptyFeedError
            If the content source yields no usable items.  Nothing is cached
            in that case, so the next request tries again.
        InvalidLimitError
            If *limit* is outside ``[1, feed_max_limit]``.
        """
        limit = self.resolve_limit(limit)
        key = str(CacheKey.feed(limit))
        cached = self._cache.get(key, self._feed_ttl)
        if cached is not None:
            return FeedResult(items=cached, cached=True)

        async with self._lock_for(key):
            cached = self._cache.get(key, self._feed_ttl)
            if cached is not None:
                return FeedResult(items=cached, cached=True)

            items = await self._content.fetch_items(limit)
            if not items:
                self._logger.warning("feed_empty", key=key, provider=self._content.get_provider_name())
                raise EmptyFeedError(provider_name=self._content.get_provider_name())

            enhanced = await self._enhancer.enhance_items(items)
            self._cache.set(key, enhanced)
            self._logger.info("feed_built", key=key, count=len(enhanced))
            return FeedResult(items=enhanced, cached=False)

    # ------------------------------------------------------------------
    # Refresh / admin
    # ------------------------------------------------------------------

    async def refresh(self, limit: int | None = None) -> RefreshResult:
        """Drop both cached domains and rebuild them concurrently.

        A failure on one side is recorded in ``errors`` and does not stop
        the other side.  An out-of-range *limit* raises
        :class:`InvalidLimitError` before anything is invalidated.
        """
        limit = self.resolve_limit(limit)
        self._cache.invalidate(str(CacheKey.feed(limit)))
        self._cache.invalidate(str(CacheKey.theme()))

        feed_outcome, theme_outcome = await asyncio.gather(
            self.get_feed(limit),
            self.get_theme(),
            return_exceptions=True,
        )

        result = RefreshResult()
        if isinstance(feed_outcome, BaseException):
            result.errors["feed"] = str(feed_outcome) or type(feed_outcome).__name__
            self._logger.warning("refresh_feed_failed", error=result.errors["feed"])
        else:
            result.feed = feed_outcome
        if isinstance(theme_outcome, BaseException):
            result.errors["theme"] = str(theme_outcome) or type(theme_outcome).__name__
            self._logger.warning("refresh_theme_failed", error=result.errors["theme"])
        else:
            result.theme = theme_outcome
        return result

    def invalidate(self, key: str) -> None:
        self._cache.invalidate(key)

    def clear(self) -> list[str]:
        """Remove every cached entry and return the keys that were present."""
        keys = self._cache.stats().keys
        self._cache.clear()
        return keys
