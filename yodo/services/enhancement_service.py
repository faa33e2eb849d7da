"""Generative enhancement of content items and page themes.

Two model calls live here:

* :meth:`EnhancementService.enhance_items` asks for a caption, a narrator
  personality and a mood for every item in a batch, in a single call.
* :meth:`EnhancementService.generate_theme` asks for a complete visual
  theme for the page.

Both run the model at very high temperature, so every response goes
through the defensive decoder and then structural validation.  Neither
method raises for upstream trouble: model errors and timeouts degrade to
the static content in :mod:`yodo.services.fallbacks`.
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import ValidationError

from yodo.config.settings import Settings
from yodo.interfaces.llm_provider import ILLMProvider
from yodo.models.content import ContentItem, EnhancedItem
from yodo.models.theme import VisualTheme
from yodo.services import json_decoder
from yodo.services.fallbacks import (
    DEFAULT_MOOD,
    DEFAULT_PERSONALITY,
    FAILURE_MOOD,
    FAILURE_PERSONALITY,
    FallbackPool,
)
from yodo.utils.errors import YodoError
from yodo.utils.logging import get_logger

_CAPTION_MAX_TOKENS = 4000
_THEME_MAX_TOKENS = 800

_CAPTION_SYSTEM_PROMPT = (
    "You are a narrator whose personality fractures with every post you see. "
    "Each Reddit post summons a completely different persona: a time traveler "
    "leaving cryptic warnings, an AI achieving unwanted sentience, a Victorian "
    "ghost discovering the internet, an alien anthropologist studying humans, a "
    "cryptid posting from the woods, a motivational speaker mid-breakdown, a "
    "conspiracy theorist who thinks everything is cake, an entity that "
    "experiences all of time at once. Be unpredictable. Be weird. Make people "
    "question reality."
)

_CAPTION_USER_TEMPLATE = """Narrate each of these Reddit posts as a TOTALLY DIFFERENT persona. \
I want wild tonal shifts from one post to the next.

Posts:
{summaries}

Return ONLY a JSON object:
{{
  "posts": [
    {{
      "index": 1,
      "caption": "an absurd, cryptic caption in that persona's voice. Weird capitalization \
and strange punctuation welcome. Examples: 'this image contains exactly 47 futures and i have \
seen them ALL', 'BROTHERS. THE TIME. IS NIGH.', 'the council will decide your fate'",
      "personality": "who is narrating (e.g. 'time traveler leaving cryptic warnings', \
'sleep-deprived oracle', 'void screaming into void')",
      "mood": "one or two chaotic words (e.g. 'manic', 'cursed', 'ascending', 'feral', 'cosmic')"
    }}
  ]
}}

Use the post numbers above as "index". Every caption must feel like it came from a different reality."""

_THEME_SYSTEM_PROMPT = (
    "You are a completely unhinged web designer who believes CSS is a form of "
    "dimensional magic. Your websites look like fever dreams: colors clash "
    "violently, fonts are barely readable, and everything feels like reality is "
    "melting. Be maximalist. Be chaotic."
)

_THEME_USER_PROMPT = """Design the most reality-bending, psychedelic theme you can imagine. \
Colors that scream at each other, fonts from an alien civilization, moods that make no sense.

Return ONLY a JSON object:
{
  "primaryColor": "aggressive neon hex color",
  "secondaryColor": "hex color that fights with primary",
  "accentColor": "hex color that makes your eyes hurt",
  "backgroundColor": "trippy hex color",
  "textColor": "hex color that may or may not be readable",
  "fontFamily": "weird font (Comic Sans MS, Papyrus, Impact, or an obscure Google Font)",
  "borderRadius": "random value like '0px', '999px', '23px', '69%'",
  "layoutStyle": "grid, masonry, list, or cards",
  "mood": "the vibe in 1-4 words (e.g. 'neon vomit', 'digital hellscape')",
  "animation": "subtle, bouncy, glitchy, smooth, or chaotic (lean glitchy/chaotic)"
}

Colors MUST be hex codes like #FF00FF."""


def build_item_summaries(items: list[ContentItem]) -> str:
    """Render the numbered post list the caption prompt embeds."""
    return "\n".join(
        f'{idx}. From r/{item.subreddit}: "{item.title}"'
        for idx, item in enumerate(items, start=1)
    )


def _as_index(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _text_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def index_annotations(decoded: Any) -> dict[int, dict[str, Any]]:
    """Map 1-based post index to its annotation dict.

    Tolerates a missing or mistyped ``posts`` array and drops entries that
    carry no usable index.  The first entry for an index wins.
    """
    if not isinstance(decoded, dict):
        return {}
    posts = decoded.get("posts")
    if not isinstance(posts, list):
        return {}

    by_index: dict[int, dict[str, Any]] = {}
    for entry in posts:
        if not isinstance(entry, dict):
            continue
        index = _as_index(entry.get("index"))
        if index is None or index in by_index:
            continue
        by_index[index] = entry
    return by_index


class EnhancementService:
    """Invents captions and themes through an :class:`ILLMProvider`.

    Parameters
    ----------
    llm_provider:
        The text-completion backend.
    settings:
        Supplies sampling temperatures and the per-call timeout.
    fallbacks:
        Static pools used whenever generation fails.
    """

    def __init__(
        self,
        llm_provider: ILLMProvider,
        settings: Settings,
        fallbacks: FallbackPool | None = None,
    ) -> None:
        self._llm = llm_provider
        self._fallbacks = fallbacks or FallbackPool()
        self._timeout = settings.llm_timeout_seconds
        self._caption_temperature = settings.llm_temperature_captions
        self._theme_temperature = settings.llm_temperature_theme
        self._logger = get_logger(__name__)

    @property
    def fallbacks(self) -> FallbackPool:
        return self._fallbacks

    async def _complete(self, system_prompt: str, user_prompt: str, **kwargs: Any) -> str:
        return await asyncio.wait_for(
            self._llm.complete(system_prompt, user_prompt, json_mode=True, **kwargs),
            timeout=self._timeout,
        )

    # ------------------------------------------------------------------
    # Captions
    # ------------------------------------------------------------------

    async def enhance_items(self, items: list[ContentItem]) -> list[EnhancedItem]:
        """Annotate every item in one model call.

        Always returns one :class:`EnhancedItem` per input item, in input
        order, with all three annotation fields populated.
        """
        if not items:
            return []

        user_prompt = _CAPTION_USER_TEMPLATE.format(summaries=build_item_summaries(items))
        try:
            raw = await self._complete(
                _CAPTION_SYSTEM_PROMPT,
                user_prompt,
                temperature=self._caption_temperature,
                max_tokens=_CAPTION_MAX_TOKENS,
            )
        except (YodoError, asyncio.TimeoutError) as exc:
            self._logger.warning(
                "enhance_items_failed",
                provider=self._llm.get_provider_name(),
                error=str(exc) or type(exc).__name__,
                count=len(items),
            )
            return [self._failure_item(item) for item in items]

        annotations = index_annotations(json_decoder.decode(raw, {"posts": []}))
        enhanced = [
            self._merge(item, annotations.get(idx, {}))
            for idx, item in enumerate(items, start=1)
        ]
        self._logger.info(
            "enhance_items_complete",
            count=len(items),
            annotated=sum(1 for idx in range(1, len(items) + 1) if idx in annotations),
        )
        return enhanced

    def _merge(self, item: ContentItem, annotation: dict[str, Any]) -> EnhancedItem:
        return EnhancedItem.from_item(
            item,
            caption=_text_or_none(annotation.get("caption")) or self._fallbacks.caption(),
            personality=_text_or_none(annotation.get("personality")) or DEFAULT_PERSONALITY,
            mood=_text_or_none(annotation.get("mood")) or DEFAULT_MOOD,
        )

    def _failure_item(self, item: ContentItem) -> EnhancedItem:
        return EnhancedItem.from_item(
            item,
            caption=self._fallbacks.caption(),
            personality=FAILURE_PERSONALITY,
            mood=FAILURE_MOOD,
        )

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    async def generate_theme(self) -> VisualTheme:
        """Generate a validated theme, or return a random static one."""
        try:
            raw = await self._complete(
                _THEME_SYSTEM_PROMPT,
                _THEME_USER_PROMPT,
                temperature=self._theme_temperature,
                max_tokens=_THEME_MAX_TOKENS,
            )
        except (YodoError, asyncio.TimeoutError) as exc:
            self._logger.warning(
                "generate_theme_failed",
                provider=self._llm.get_provider_name(),
                error=str(exc) or type(exc).__name__,
            )
            return self._fallbacks.theme()

        decoded = json_decoder.decode(raw, None)
        if decoded is None:
            return self._fallbacks.theme()
        try:
            theme = VisualTheme.model_validate(decoded)
        except ValidationError as exc:
            self._logger.warning(
                "generated_theme_invalid",
                errors=[".".join(str(p) for p in e["loc"]) for e in exc.errors()],
            )
            return self._fallbacks.theme()

        self._logger.info("generate_theme_complete", mood=theme.mood, layout=theme.layout_style.value)
        return theme
