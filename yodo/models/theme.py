"""Visual theme model and the presentation helpers derived from it.

A :class:`VisualTheme` is what the generative model invents for the page:
five color tokens, a font, a corner radius, a layout style, a mood and an
animation style.  The model is the validation/coercion boundary between the
generator's loosely-typed JSON and the renderer: every field must be present
and well-typed, enum values are matched case-insensitively, and colors must
be hex tokens.  Anything else fails validation and the caller falls back to
a static theme.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# Fonts every browser already has; no stylesheet needs to be loaded for them.
WEB_SAFE_FONTS = frozenset(
    {
        "Arial",
        "Helvetica",
        "Times New Roman",
        "Courier",
        "Courier New",
        "Verdana",
        "Georgia",
        "Palatino",
        "Garamond",
        "Comic Sans MS",
        "Trebuchet MS",
        "Impact",
    }
)


class LayoutStyle(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    GRID = "grid"
    MASONRY = "masonry"
    LIST = "list"
    CARDS = "cards"


class AnimationStyle(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    SUBTLE = "subtle"
    BOUNCY = "bouncy"
    GLITCHY = "glitchy"
    SMOOTH = "smooth"
    CHAOTIC = "chaotic"


_ANIMATION_CLASSES: dict[AnimationStyle, str] = {
    AnimationStyle.SUBTLE: "animate-fade-in",
    AnimationStyle.BOUNCY: "animate-bounce-in",
    AnimationStyle.GLITCHY: "animate-glitch",
    AnimationStyle.SMOOTH: "animate-slide-in",
    AnimationStyle.CHAOTIC: "animate-chaos",
}


class VisualTheme(BaseModel):
    """A complete, renderer-safe page theme."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    primary_color: str
    secondary_color: str
    accent_color: str
    background_color: str
    text_color: str
    font_family: str
    border_radius: str
    layout_style: LayoutStyle
    mood: str
    animation: AnimationStyle

    @field_validator(
        "primary_color",
        "secondary_color",
        "accent_color",
        "background_color",
        "text_color",
    )
    @classmethod
    def _check_hex_color(cls, value: str) -> str:
        if not _HEX_COLOR_RE.match(value):
            raise ValueError(f"not a hex color: {value!r}")
        return value.upper()

    @field_validator("font_family", "border_radius", "mood")
    @classmethod
    def _check_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("layout_style", "animation", mode="before")
    @classmethod
    def _normalize_enum(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def animation_class(self) -> str:
        """CSS class the frontend applies for this theme's animation style."""
        return _ANIMATION_CLASSES[self.animation]

    @property
    def is_web_safe_font(self) -> bool:
        return self.font_family in WEB_SAFE_FONTS

    def contrast_text_color(self) -> str:
        """Readable text color for content drawn on the primary color."""
        return contrast_color(self.primary_color)


def contrast_color(hex_color: str) -> str:
    """Return black or white, whichever reads better on *hex_color*.

    Uses the relative luminance approximation
    ``0.299 R + 0.587 G + 0.114 B``; short ``#RGB`` forms are expanded.
    Unparseable input yields white.
    """
    color = hex_color.strip().lstrip("#")
    if len(color) == 3:
        color = "".join(ch * 2 for ch in color)
    if len(color) < 6:
        return "#FFFFFF"
    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
    except ValueError:
        return "#FFFFFF"

    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#FFFFFF"
