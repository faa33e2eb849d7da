"""yodo domain models -- re-exports all public model classes.

    - cache.py    -- cache keys (domain + variant) and store statistics
    - content.py  -- content items and generated-annotation enhanced items
    - theme.py    -- generated visual theme and its presentation helpers
"""

from __future__ import annotations

from yodo.models.cache import CacheDomain, CacheKey, CacheStats
from yodo.models.content import ContentItem, EnhancedItem
from yodo.models.theme import (
    AnimationStyle,
    LayoutStyle,
    VisualTheme,
    contrast_color,
)

__all__ = [
    "AnimationStyle",
    "CacheDomain",
    "CacheKey",
    "CacheStats",
    "ContentItem",
    "EnhancedItem",
    "LayoutStyle",
    "VisualTheme",
    "contrast_color",
]
