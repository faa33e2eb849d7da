"""Abstract base class for content source providers.

A content provider fetches a batch of candidate image posts from a rotating
set of named channels.  The only implementation today reads public Reddit
listings; the interface keeps the orchestration layer ignorant of that.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from yodo.models.content import ContentItem


class IContentProvider(ABC):
    """Contract for content sources."""

    @abstractmethod
    async def fetch_items(self, limit: int) -> list[ContentItem]:
        """Fetch up to *limit* items that carry a usable image reference.

        Implementations degrade per channel: a channel that fails to load
        contributes nothing instead of failing the whole batch.  An empty
        list is a valid result and means nothing usable was found.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider, e.g. ``"reddit"``."""
