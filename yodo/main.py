"""yodo FastAPI application entry point.

Wires together all providers and services via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml``, configures
structured logging, and builds every component exactly once per process.
The cache store in particular is a single instance handed to the feed
service, never a module-level global.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from yodo import __version__
from yodo.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from yodo.api.routes import router as api_router
from yodo.config.loader import load_config
from yodo.config.settings import Settings
from yodo.interfaces.llm_provider import ILLMProvider
from yodo.providers.cache.memory_cache import MemoryCacheProvider
from yodo.providers.content.reddit_provider import DEFAULT_CHANNELS, RedditContentProvider
from yodo.providers.llm.anthropic_provider import AnthropicLLMProvider
from yodo.providers.llm.ollama_provider import OllamaLLMProvider
from yodo.providers.llm.openai_provider import OpenAILLMProvider
from yodo.services.enhancement_service import EnhancementService
from yodo.services.fallbacks import FallbackPool
from yodo.services.feed_service import FeedService
from yodo.utils.logging import configure_logging, get_logger

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"

settings = Settings()
config = load_config(str(_CONFIG_PATH), settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first available LLM provider based on configured API keys.

    Priority order: OpenAI -> Anthropic -> Ollama (always available).
    """
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    return OllamaLLMProvider(settings=app_settings)


def _channels_from_config(app_config: dict[str, Any]) -> list[str]:
    channels = (app_config.get("content") or {}).get("channels") or []
    cleaned = [str(c).strip() for c in channels if str(c).strip()]
    return cleaned or list(DEFAULT_CHANNELS)


def _build_all(app_settings: Settings, app_config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_config = config if app_config is None else app_config

    http_client = httpx.AsyncClient(timeout=app_settings.http_timeout_seconds)
    llm = _build_llm_provider(app_settings)
    cache = MemoryCacheProvider()

    content_provider = RedditContentProvider(
        http_client=http_client,
        settings=app_settings,
        channels=_channels_from_config(app_config),
    )
    enhancement_service = EnhancementService(
        llm_provider=llm,
        settings=app_settings,
        fallbacks=FallbackPool.from_config(app_config),
    )
    feed_service = FeedService(
        cache=cache,
        content_provider=content_provider,
        enhancement_service=enhancement_service,
        settings=app_settings,
    )

    provider_registry: dict[str, Any] = {
        "llm": llm.get_provider_name(),
        "llm_available": llm.is_available(),
        "content": content_provider.get_provider_name(),
        "channels": len(content_provider.channels),
        "cache": type(cache).__name__,
    }

    return {
        "http_client": http_client,
        "cache": cache,
        "llm": llm,
        "content_provider": content_provider,
        "enhancement_service": enhancement_service,
        "feed_service": feed_service,
        "provider_registry": provider_registry,
        "primary_llm_name": llm.get_provider_name(),
    }


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        primary_llm=components["primary_llm_name"],
        feed_ttl=settings.feed_ttl_seconds,
        theme_ttl=settings.theme_ttl_seconds,
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="yodo API",
        version=__version__,
        description=(
            "An endlessly re-rolling feed of odd images from quirky subreddits, "
            "captioned by a generative model and dressed in a generated theme."
        ),
        lifespan=_lifespan,
    )

    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.get_cors_origins())

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "yodo.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
