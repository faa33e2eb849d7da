"""Static fallback content used when generation fails.

The enhancement service never lets a model failure reach the user as an
error: a missing caption becomes one of :data:`DEFAULT_CAPTIONS` and a
failed theme becomes one of :data:`DEFAULT_THEMES`.  Deployments can swap
either pool through the ``fallbacks`` section of ``config/config.yaml``.
"""

from __future__ import annotations

import random
from typing import Any

from pydantic import ValidationError

from yodo.models.theme import VisualTheme
from yodo.utils.logging import get_logger

_logger = get_logger(__name__)

DEFAULT_PERSONALITY = "mysterious stranger"
DEFAULT_MOOD = "curious"
FAILURE_PERSONALITY = "confused AI"
FAILURE_MOOD = "uncertain"

DEFAULT_CAPTIONS: tuple[str, ...] = (
    "this image contains secrets the GOVERNMENT doesn't want you to see",
    "POV: You've breached containment",
    "i can taste colors now and they taste like SCREAMING",
    "this activated something PRIMAL in my consciousness",
    "The timeline fractured here. THIS is where it all went wrong.",
    "why does this image know my NAME",
    "this was taken 3 seconds before the incident",
    "BROTHERS. THE PROPHECY. IT'S HAPPENING.",
    "i showed this to my therapist and now SHE needs therapy",
    "this image is perceiving ME back",
    "delete this before THEY find it",
    "tag yourself i'm the void in the background",
)

DEFAULT_THEMES: tuple[VisualTheme, ...] = (
    VisualTheme(
        primary_color="#FF00FF",
        secondary_color="#00FFFF",
        accent_color="#FFFF00",
        background_color="#000000",
        text_color="#00FF00",
        font_family="Comic Sans MS",
        border_radius="69px",
        layout_style="masonry",
        mood="neon nightmare",
        animation="glitchy",
    ),
    VisualTheme(
        primary_color="#FF1493",
        secondary_color="#7FFF00",
        accent_color="#FF4500",
        background_color="#FFFFFF",
        text_color="#8B008B",
        font_family="Papyrus",
        border_radius="0px",
        layout_style="grid",
        mood="digital psychosis",
        animation="chaotic",
    ),
    VisualTheme(
        primary_color="#39FF14",
        secondary_color="#FF006E",
        accent_color="#00D9FF",
        background_color="#0D0D0D",
        text_color="#FFFFFF",
        font_family="Impact",
        border_radius="999px",
        layout_style="cards",
        mood="reality dissolution",
        animation="glitchy",
    ),
    VisualTheme(
        primary_color="#FF073A",
        secondary_color="#FFD700",
        accent_color="#00BFFF",
        background_color="#2F004F",
        text_color="#39FF14",
        font_family="Courier New",
        border_radius="23px",
        layout_style="list",
        mood="manic pixels",
        animation="chaotic",
    ),
    VisualTheme(
        primary_color="#FF6EC7",
        secondary_color="#00FF9F",
        accent_color="#FFEA00",
        background_color="#1B0034",
        text_color="#FFFFFF",
        font_family="Georgia",
        border_radius="15px",
        layout_style="masonry",
        mood="vaporwave hell",
        animation="glitchy",
    ),
)


class FallbackPool:
    """Random picks from the static caption and theme pools."""

    def __init__(
        self,
        captions: tuple[str, ...] | list[str] = DEFAULT_CAPTIONS,
        themes: tuple[VisualTheme, ...] | list[VisualTheme] = DEFAULT_THEMES,
        rng: random.Random | None = None,
    ) -> None:
        self._captions = tuple(captions) or DEFAULT_CAPTIONS
        self._themes = tuple(themes) or DEFAULT_THEMES
        self._rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: dict[str, Any], rng: random.Random | None = None) -> FallbackPool:
        """Build a pool from the ``fallbacks`` section of the loaded config.

        Empty or missing lists keep the built-in pools.  Theme entries that
        fail validation are logged and skipped.
        """
        section = config.get("fallbacks") or {}
        captions = [c for c in section.get("captions") or [] if isinstance(c, str) and c.strip()]

        themes: list[VisualTheme] = []
        for raw in section.get("themes") or []:
            try:
                themes.append(VisualTheme.model_validate(raw))
            except ValidationError as exc:
                _logger.warning("fallback_theme_invalid", error=str(exc))

        return cls(
            captions=captions or DEFAULT_CAPTIONS,
            themes=themes or DEFAULT_THEMES,
            rng=rng,
        )

    @property
    def captions(self) -> tuple[str, ...]:
        return self._captions

    @property
    def themes(self) -> tuple[VisualTheme, ...]:
        return self._themes

    def caption(self) -> str:
        return self._rng.choice(self._captions)

    def theme(self) -> VisualTheme:
        return self._rng.choice(self._themes)
