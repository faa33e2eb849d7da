"""Integration tests for the HTTP API using FastAPI's TestClient.

The real router, FeedService, MemoryCacheProvider and EnhancementService
are wired together; only the content source and the LLM are mocked.
"""

from __future__ import annotations

import asyncio
import json
import random
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.conftest import VALID_THEME_JSON, FakeClock, captions_json, make_item, make_settings
from yodo.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from yodo.api.routes import router as api_router
from yodo.interfaces.content_provider import IContentProvider
from yodo.providers.cache.memory_cache import MemoryCacheProvider
from yodo.services.enhancement_service import EnhancementService
from yodo.services.fallbacks import DEFAULT_CAPTIONS, DEFAULT_THEMES, FallbackPool
from yodo.services.feed_service import FeedService
from yodo.utils.errors import ConfigurationError, LLMError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _captions_for_prompt(user_prompt: str) -> str:
    count = sum(1 for line in user_prompt.splitlines() if " From r/" in line)
    return captions_json(count)


def _build_app(
    llm: MagicMock,
    content: MagicMock,
    clock: FakeClock,
    *,
    registry: dict[str, Any] | None = None,
) -> FastAPI:
    settings = make_settings()
    cache = MemoryCacheProvider(clock=clock)
    enhancement = EnhancementService(
        llm_provider=llm,
        settings=settings,
        fallbacks=FallbackPool(rng=random.Random(0)),
    )

    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)
    app.state.cache = cache
    app.state.feed_service = FeedService(cache, content, enhancement, settings)
    app.state.provider_registry = registry or {
        "llm": "mock-llm",
        "llm_available": True,
        "content": "reddit",
        "channels": 20,
        "cache": "MemoryCacheProvider",
    }
    return app


@pytest.fixture
def content() -> MagicMock:
    provider = MagicMock(spec=IContentProvider)
    provider.fetch_items = AsyncMock(
        side_effect=lambda limit: [make_item(i) for i in range(1, limit + 1)]
    )
    provider.get_provider_name.return_value = "reddit"
    return provider


@pytest.fixture
def client_factory(
    llm_router: Callable[..., MagicMock], content: MagicMock, fake_clock: FakeClock
) -> Callable[..., TestClient]:
    def _make(
        *,
        captions: Any = _captions_for_prompt,
        theme: Any = json.dumps(VALID_THEME_JSON),
        registry: dict[str, Any] | None = None,
        with_llm: bool = False,
    ) -> TestClient:
        llm = llm_router(captions=captions, theme=theme)
        app = _build_app(llm, content, fake_clock, registry=registry)
        if with_llm:
            app.state.llm = llm
        return TestClient(app)

    return _make


# ---------------------------------------------------------------------------
# GET /api/feed
# ---------------------------------------------------------------------------


class TestFeedEndpoint:
    def test_miss_then_hit(self, client_factory: Callable[..., TestClient], content: MagicMock) -> None:
        client = client_factory()

        first = client.get("/api/feed")
        assert first.status_code == 200
        body = first.json()
        assert body["count"] == 15
        assert body["cached"] is False
        assert isinstance(body["timestamp"], int)
        post = body["posts"][0]
        assert post["imageUrl"] == "https://i.redd.it/img1.jpg"
        assert post["aiCaption"] == "caption 1"
        assert post["aiPersonality"] == "persona 1"
        assert post["mood"] == "mood 1"

        second = client.get("/api/feed")
        assert second.status_code == 200
        assert second.json()["cached"] is True
        assert second.json()["posts"] == body["posts"]
        content.fetch_items.assert_awaited_once_with(15)

    def test_limits_cached_separately(
        self, client_factory: Callable[..., TestClient], content: MagicMock
    ) -> None:
        client = client_factory()
        client.get("/api/feed?limit=15")
        response = client.get("/api/feed?limit=30")

        assert response.json()["count"] == 30
        assert response.json()["cached"] is False
        assert client.get("/api/cache").json()["keys"] == ["feed_15", "feed_30"]

    def test_expires_after_ttl(
        self, client_factory: Callable[..., TestClient], fake_clock: FakeClock
    ) -> None:
        client = client_factory()
        client.get("/api/feed")
        fake_clock.advance(121)
        assert client.get("/api/feed").json()["cached"] is False

    def test_empty_content_returns_404(
        self, client_factory: Callable[..., TestClient], content: MagicMock
    ) -> None:
        content.fetch_items = AsyncMock(return_value=[])
        client = client_factory()

        response = client.get("/api/feed")

        assert response.status_code == 404
        assert response.json() == {"error": "No posts found", "posts": []}
        assert client.get("/api/cache").json() == {"size": 0, "keys": []}

    def test_llm_failure_still_serves_posts(self, client_factory: Callable[..., TestClient]) -> None:
        client = client_factory(captions=LLMError("model offline", provider_name="mock-llm"))

        response = client.get("/api/feed")

        assert response.status_code == 200
        body = response.json()
        assert body["cached"] is False
        assert body["count"] == 15
        for post in body["posts"]:
            assert post["aiCaption"] in DEFAULT_CAPTIONS
            assert post["aiPersonality"] == "confused AI"
            assert post["mood"] == "uncertain"

    @pytest.mark.parametrize("limit", [0, 51, 101, "lots"])
    def test_invalid_limit_rejected(self, client_factory: Callable[..., TestClient], limit: Any) -> None:
        assert client_factory().get(f"/api/feed?limit={limit}").status_code == 422

    def test_limit_above_max_is_rejected_not_served_from_max_entry(
        self, client_factory: Callable[..., TestClient], content: MagicMock
    ) -> None:
        client = client_factory()
        assert client.get("/api/feed?limit=50").json()["count"] == 50

        response = client.get("/api/feed?limit=51")

        assert response.status_code == 422
        assert response.json() == {
            "error": "Invalid limit",
            "details": "limit must be between 1 and 50, got 51",
        }
        content.fetch_items.assert_awaited_once_with(50)
        assert client.get("/api/cache").json()["keys"] == ["feed_50"]

    def test_unexpected_failure_returns_500_envelope(self) -> None:
        feed_service = MagicMock()
        feed_service.get_feed = AsyncMock(side_effect=RuntimeError("kaput"))
        app = FastAPI()
        app.include_router(api_router)
        app.state.feed_service = feed_service

        response = TestClient(app).get("/api/feed")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch feed", "details": "kaput"}


# ---------------------------------------------------------------------------
# GET /api/theme
# ---------------------------------------------------------------------------


class TestThemeEndpoint:
    def test_theme_miss_then_hit(self, client_factory: Callable[..., TestClient]) -> None:
        client = client_factory()

        first = client.get("/api/theme").json()
        assert first["cached"] is False
        theme = first["theme"]
        assert theme["primaryColor"] == "#FF00FF"
        assert theme["layoutStyle"] == "masonry"
        assert theme["animation"] == "glitchy"
        assert theme["fontFamily"] == "Papyrus"

        second = client.get("/api/theme").json()
        assert second["cached"] is True
        assert second["theme"] == theme

    def test_invalid_theme_uses_fallback(self, client_factory: Callable[..., TestClient]) -> None:
        client = client_factory(theme='{"primaryColor": "not a color"}')

        response = client.get("/api/theme")

        assert response.status_code == 200
        fallback_moods = {t.mood for t in DEFAULT_THEMES}
        assert response.json()["theme"]["mood"] in fallback_moods

    def test_unexpected_failure_returns_500_envelope(self) -> None:
        feed_service = MagicMock()
        feed_service.get_theme = AsyncMock(side_effect=RuntimeError("melted"))
        app = FastAPI()
        app.include_router(api_router)
        app.state.feed_service = feed_service

        response = TestClient(app).get("/api/theme")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate theme", "details": "melted"}


# ---------------------------------------------------------------------------
# POST /api/refresh
# ---------------------------------------------------------------------------


class TestRefreshEndpoint:
    def test_refresh_rebuilds_cached_entries(
        self, client_factory: Callable[..., TestClient], content: MagicMock
    ) -> None:
        client = client_factory()
        client.get("/api/feed")
        client.get("/api/theme")

        body = client.post("/api/refresh").json()

        assert body["errors"] == {}
        assert body["feed"]["cached"] is False
        assert body["feed"]["count"] == 15
        assert body["theme"]["cached"] is False
        assert content.fetch_items.await_count == 2
        assert client.get("/api/feed").json()["cached"] is True

    def test_partial_failure(
        self, client_factory: Callable[..., TestClient], content: MagicMock
    ) -> None:
        content.fetch_items = AsyncMock(return_value=[])
        client = client_factory()

        response = client.post("/api/refresh?limit=5")

        assert response.status_code == 200
        body = response.json()
        assert body["feed"] is None
        assert body["theme"]["theme"]["mood"] == "neon vomit"
        assert body["errors"] == {"feed": "[reddit] No posts found"}

    def test_limit_above_max_is_rejected(
        self, client_factory: Callable[..., TestClient], content: MagicMock
    ) -> None:
        client = client_factory()
        client.get("/api/theme")

        response = client.post("/api/refresh?limit=51")

        assert response.status_code == 422
        assert response.json()["error"] == "Invalid limit"
        content.fetch_items.assert_not_awaited()
        assert client.get("/api/cache").json()["keys"] == ["theme"]


# ---------------------------------------------------------------------------
# Cache admin
# ---------------------------------------------------------------------------


class TestCacheEndpoints:
    def test_stats_invalidate_and_clear(self, client_factory: Callable[..., TestClient]) -> None:
        client = client_factory()
        client.get("/api/feed?limit=5")
        client.get("/api/theme")

        assert client.get("/api/cache").json() == {"size": 2, "keys": ["feed_5", "theme"]}

        assert client.delete("/api/cache/feed_5").json() == {"cleared": ["feed_5"]}
        assert client.delete("/api/cache/feed_5").json() == {"cleared": []}
        assert client.get("/api/cache").json()["keys"] == ["theme"]

        assert client.delete("/api/cache").json() == {"cleared": ["theme"]}
        assert client.get("/api/cache").json() == {"size": 0, "keys": []}


# ---------------------------------------------------------------------------
# Health and middleware
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    def test_healthy(self, client_factory: Callable[..., TestClient]) -> None:
        from yodo import __version__

        body = client_factory().get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["providers"]["content"] == "reddit"

    def test_degraded_without_llm(self, client_factory: Callable[..., TestClient]) -> None:
        client = client_factory(registry={"llm": "ollama", "llm_available": False})
        assert client.get("/api/health").json()["status"] == "degraded"

    def test_verified_credentials_report_healthy(
        self, client_factory: Callable[..., TestClient], mock_llm: MagicMock
    ) -> None:
        mock_llm.validate_credentials = AsyncMock(return_value=True)

        body = client_factory(with_llm=True).get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["providers"]["llm_verified"] is True
        mock_llm.validate_credentials.assert_awaited_once()

    @pytest.mark.parametrize(
        "outcome",
        [False, LLMError("bad key", provider_name="mock-llm"), asyncio.TimeoutError()],
    )
    def test_failed_credentials_report_degraded(
        self, client_factory: Callable[..., TestClient], mock_llm: MagicMock, outcome: Any
    ) -> None:
        if isinstance(outcome, BaseException):
            mock_llm.validate_credentials = AsyncMock(side_effect=outcome)
        else:
            mock_llm.validate_credentials = AsyncMock(return_value=outcome)

        body = client_factory(with_llm=True).get("/api/health").json()

        assert body["status"] == "degraded"
        assert body["providers"]["llm_verified"] is False


class TestErrorHandlingMiddleware:
    def test_yodo_error_becomes_500(self) -> None:
        app = FastAPI()
        app.add_middleware(ErrorHandlingMiddleware)

        @app.get("/boom")
        async def boom() -> None:
            raise ConfigurationError("missing channels")

        response = TestClient(app).get("/boom")

        assert response.status_code == 500
        assert response.json() == {"error": "ConfigurationError", "details": "missing channels"}
