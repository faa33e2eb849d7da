"""Unit tests for the cache, content and theme models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from tests.conftest import VALID_THEME_JSON, make_item
from yodo.models.cache import CacheDomain, CacheKey, CacheStats
from yodo.models.content import EnhancedItem
from yodo.models.theme import AnimationStyle, LayoutStyle, VisualTheme, contrast_color


# ======================================================================
# CacheKey
# ======================================================================


class TestCacheKey:
    def test_theme_key(self) -> None:
        assert str(CacheKey.theme()) == "theme"

    def test_feed_key_includes_limit(self) -> None:
        assert str(CacheKey.feed(15)) == "feed_15"
        assert str(CacheKey.feed(30)) == "feed_30"

    def test_distinct_variants_never_collide(self) -> None:
        assert str(CacheKey.feed(15)) != str(CacheKey.feed(30))
        assert CacheKey.feed(15) != CacheKey.feed(30)

    def test_key_is_hashable_and_frozen(self) -> None:
        key = CacheKey.feed(15)
        assert {key: 1}[CacheKey.feed(15)] == 1
        with pytest.raises(ValidationError):
            key.variant = "30"  # type: ignore[misc]

    def test_domain_values(self) -> None:
        assert CacheDomain.THEME.value == "theme"
        assert CacheDomain.FEED.value == "feed"

    def test_stats_defaults(self) -> None:
        assert CacheStats() == CacheStats(size=0, keys=[])


# ======================================================================
# ContentItem / EnhancedItem
# ======================================================================


class TestEnhancedItem:
    def test_from_item_copies_fields(self) -> None:
        item = make_item(3)
        enhanced = EnhancedItem.from_item(item, caption="c", personality="p", mood="m")
        assert enhanced.id == item.id
        assert enhanced.image_url == item.image_url
        assert enhanced.is_enhanced is True

    def test_serializes_with_frontend_aliases(self) -> None:
        enhanced = EnhancedItem.from_item(make_item(1), caption="c", personality="p", mood="m")
        data = enhanced.model_dump(by_alias=True)
        assert data["imageUrl"] == "https://i.redd.it/img1.jpg"
        assert data["numComments"] == 1
        assert data["isVideo"] is False
        assert data["aiCaption"] == "c"
        assert data["aiPersonality"] == "p"
        assert data["mood"] == "m"

    def test_accepts_aliases_on_input(self) -> None:
        data = EnhancedItem.from_item(make_item(1), caption="c", personality="p", mood="m")
        round_tripped = EnhancedItem.model_validate(data.model_dump(by_alias=True))
        assert round_tripped == data

    def test_not_enhanced_without_annotations(self) -> None:
        enhanced = EnhancedItem(**make_item(1).model_dump())
        assert enhanced.is_enhanced is False


# ======================================================================
# VisualTheme
# ======================================================================


class TestVisualTheme:
    def test_validates_generated_payload(self) -> None:
        theme = VisualTheme.model_validate(VALID_THEME_JSON)
        assert theme.primary_color == "#FF00FF"
        assert theme.accent_color == "#FF0"
        assert theme.layout_style is LayoutStyle.MASONRY
        assert theme.animation is AnimationStyle.GLITCHY

    def test_serializes_camel_case(self) -> None:
        data = VisualTheme.model_validate(VALID_THEME_JSON).model_dump(by_alias=True, mode="json")
        assert data["primaryColor"] == "#FF00FF"
        assert data["layoutStyle"] == "masonry"
        assert data["animation"] == "glitchy"

    @pytest.mark.parametrize("field", ["primaryColor", "fontFamily", "layoutStyle", "mood"])
    def test_missing_field_rejected(self, field: str) -> None:
        payload = dict(VALID_THEME_JSON)
        del payload[field]
        with pytest.raises(ValidationError):
            VisualTheme.model_validate(payload)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("layoutStyle", "spiral"),
            ("animation", "wobbly"),
            ("primaryColor", "hot pink"),
            ("textColor", "#GGGGGG"),
            ("borderRadius", "   "),
            ("mood", ""),
            ("backgroundColor", 123),
        ],
    )
    def test_bad_values_rejected(self, field: str, value: Any) -> None:
        payload = dict(VALID_THEME_JSON)
        payload[field] = value
        with pytest.raises(ValidationError):
            VisualTheme.model_validate(payload)

    def test_rejects_non_object(self) -> None:
        with pytest.raises(ValidationError):
            VisualTheme.model_validate(["not", "a", "theme"])

    def test_animation_class(self) -> None:
        theme = VisualTheme.model_validate({**VALID_THEME_JSON, "animation": "smooth"})
        assert theme.animation_class == "animate-slide-in"

    def test_web_safe_font(self) -> None:
        assert VisualTheme.model_validate(VALID_THEME_JSON).is_web_safe_font is False
        theme = VisualTheme.model_validate({**VALID_THEME_JSON, "fontFamily": "Impact"})
        assert theme.is_web_safe_font is True


class TestContrastColor:
    @pytest.mark.parametrize(
        ("color", "expected"),
        [
            ("#FFFFFF", "#000000"),
            ("#000000", "#FFFFFF"),
            ("#FFFF00", "#000000"),
            ("#0000FF", "#FFFFFF"),
            ("#fff", "#000000"),
            ("nonsense", "#FFFFFF"),
            ("#12", "#FFFFFF"),
        ],
    )
    def test_contrast_color(self, color: str, expected: str) -> None:
        assert contrast_color(color) == expected

    def test_theme_contrast_text_color(self) -> None:
        theme = VisualTheme.model_validate({**VALID_THEME_JSON, "primaryColor": "#000000"})
        assert theme.contrast_text_color() == "#FFFFFF"
