"""Content item models.

A :class:`ContentItem` is one image post pulled from a content channel.  An
:class:`EnhancedItem` is the same post plus the generated annotation fields
(caption, personality, mood).  Both serialize with camelCase aliases because
that is the shape the frontend consumes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContentItem(BaseModel):
    """One image post from a content channel (subreddit)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    author: str = ""
    subreddit: str
    url: str = ""
    # Absent for posts with no usable image; the content provider drops those.
    image_url: str | None = None
    thumbnail: str | None = None
    score: int = 0
    num_comments: int = 0
    # Epoch seconds, as reported by the source.
    created: float = 0.0
    permalink: str = ""
    is_video: bool = False


class EnhancedItem(ContentItem):
    """A content item augmented with generated annotation fields.

    The annotation fields are optional until enhancement runs; the
    enhancement service always fills them (possibly with static fallback
    text) before an item reaches a consumer.
    """

    caption: str | None = Field(default=None, alias="aiCaption")
    personality: str | None = Field(default=None, alias="aiPersonality")
    mood: str | None = Field(default=None, alias="mood")

    @classmethod
    def from_item(
        cls,
        item: ContentItem,
        *,
        caption: str,
        personality: str,
        mood: str,
    ) -> EnhancedItem:
        return cls(
            **item.model_dump(),
            caption=caption,
            personality=personality,
            mood=mood,
        )

    @property
    def is_enhanced(self) -> bool:
        return bool(self.caption and self.personality and self.mood)
