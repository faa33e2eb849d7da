"""Pydantic response schemas for the yodo API.

Defines the public JSON contract of every endpoint.  Item and theme
payloads reuse the domain models, which already serialize with the
camelCase aliases the frontend reads (``imageUrl``, ``aiCaption``,
``primaryColor`` ...).  Error envelopes are plain ``{"error": ...}`` bodies
with either ``details`` or an empty ``posts`` list, as the frontend expects.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from yodo.models.content import EnhancedItem
from yodo.models.theme import VisualTheme


class FeedResponse(BaseModel):
    """A batch of enhanced posts."""

    posts: list[EnhancedItem]
    count: int
    timestamp: int = Field(description="Epoch milliseconds")
    cached: bool = False


class ThemeResponse(BaseModel):
    theme: VisualTheme
    timestamp: int = Field(description="Epoch milliseconds")
    cached: bool = False


class RefreshResponse(BaseModel):
    """Both halves of a refresh; a failed half is ``None`` with its error listed."""

    feed: FeedResponse | None = None
    theme: ThemeResponse | None = None
    errors: dict[str, str] = Field(default_factory=dict)


class CacheStatsResponse(BaseModel):
    size: int
    keys: list[str] = Field(default_factory=list)


class CacheClearedResponse(BaseModel):
    cleared: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    details: str | None = None


class EmptyFeedResponse(BaseModel):
    """Returned with 404 when the content source produced nothing usable."""

    error: str = "No posts found"
    posts: list[EnhancedItem] = Field(default_factory=list)
