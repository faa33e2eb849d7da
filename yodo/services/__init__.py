"""Application services: decoding, enhancement and feed orchestration."""

from yodo.services.enhancement_service import EnhancementService
from yodo.services.fallbacks import FallbackPool
from yodo.services.feed_service import FeedResult, FeedService, RefreshResult, ThemeResult

__all__ = [
    "EnhancementService",
    "FallbackPool",
    "FeedResult",
    "FeedService",
    "RefreshResult",
    "ThemeResult",
]
