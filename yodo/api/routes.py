"""FastAPI routes for the yodo feed.

Route handlers are thin: they resolve the services placed on ``app.state``
by main.py's ``_build_all``, delegate to :class:`FeedService`, and shape
the JSON envelope.

    Endpoint              Method  Description
    /api/feed             GET     Enhanced post batch (read-through cache)
    /api/theme            GET     Generated visual theme (read-through cache)
    /api/refresh          POST    Drop both domains and rebuild concurrently
    /api/cache            GET     Cache size and keys
    /api/cache            DELETE  Clear every entry
    /api/cache/{key}      DELETE  Invalidate one entry
    /api/health           GET     Health check + live LLM credential check
"""

from __future__ import annotations

import asyncio
import time
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from yodo import __version__
from yodo.api.schemas import (
    CacheClearedResponse,
    CacheStatsResponse,
    EmptyFeedResponse,
    ErrorResponse,
    FeedResponse,
    HealthResponse,
    RefreshResponse,
    ThemeResponse,
)
from yodo.interfaces.cache_provider import ICacheProvider
from yodo.interfaces.llm_provider import ILLMProvider
from yodo.services.feed_service import FeedResult, FeedService, ThemeResult
from yodo.utils.errors import EmptyFeedError, InvalidLimitError, YodoError
from yodo.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")

_HEALTH_CHECK_TIMEOUT = 5.0


def _get_feed_service(request: Request) -> FeedService:
    return request.app.state.feed_service


def _get_cache(request: Request) -> ICacheProvider:
    return request.app.state.cache


FeedServiceDep = Annotated[FeedService, Depends(_get_feed_service)]
CacheDep = Annotated[ICacheProvider, Depends(_get_cache)]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _feed_response(result: FeedResult) -> FeedResponse:
    return FeedResponse(
        posts=result.items,
        count=result.count,
        timestamp=_now_ms(),
        cached=result.cached,
    )


def _theme_response(result: ThemeResult) -> ThemeResponse:
    return ThemeResponse(theme=result.theme, timestamp=_now_ms(), cached=result.cached)


def _error(status_code: int, error: str, exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=error, details=str(exc) or type(exc).__name__)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get(
    "/feed",
    response_model=FeedResponse,
    responses={
        404: {"model": EmptyFeedResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Get an enhanced feed batch",
)
async def get_feed(
    feed_service: FeedServiceDep,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> Any:
    try:
        result = await feed_service.get_feed(limit)
    except InvalidLimitError as exc:
        return _error(422, "Invalid limit", exc)
    except EmptyFeedError:
        return JSONResponse(status_code=404, content=EmptyFeedResponse().model_dump())
    except Exception as exc:
        _logger.error("feed_request_failed", error=str(exc), error_type=type(exc).__name__)
        return _error(500, "Failed to fetch feed", exc)
    return _feed_response(result)


@router.get(
    "/theme",
    response_model=ThemeResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Get the current generated theme",
)
async def get_theme(feed_service: FeedServiceDep) -> Any:
    try:
        result = await feed_service.get_theme()
    except Exception as exc:
        _logger.error("theme_request_failed", error=str(exc), error_type=type(exc).__name__)
        return _error(500, "Failed to generate theme", exc)
    return _theme_response(result)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Regenerate feed and theme together",
)
async def refresh(
    feed_service: FeedServiceDep,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> Any:
    try:
        result = await feed_service.refresh(limit)
    except InvalidLimitError as exc:
        return _error(422, "Invalid limit", exc)
    return RefreshResponse(
        feed=_feed_response(result.feed) if result.feed is not None else None,
        theme=_theme_response(result.theme) if result.theme is not None else None,
        errors=result.errors,
    )


@router.get("/cache", response_model=CacheStatsResponse, summary="Cache statistics")
async def cache_stats(cache: CacheDep) -> CacheStatsResponse:
    stats = cache.stats()
    return CacheStatsResponse(size=stats.size, keys=stats.keys)


@router.delete("/cache", response_model=CacheClearedResponse, summary="Clear the cache")
async def clear_cache(feed_service: FeedServiceDep) -> CacheClearedResponse:
    cleared = feed_service.clear()
    _logger.info("cache_cleared", keys=cleared)
    return CacheClearedResponse(cleared=cleared)


@router.delete(
    "/cache/{key}",
    response_model=CacheClearedResponse,
    summary="Invalidate one cache entry",
)
async def invalidate_cache_key(
    key: str,
    cache: CacheDep,
    feed_service: FeedServiceDep,
) -> CacheClearedResponse:
    present = key in cache.stats().keys
    feed_service.invalidate(key)
    return CacheClearedResponse(cleared=[key] if present else [])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider status.

    The selected LLM is actively checked with ``validate_credentials()``;
    the result is reported as ``providers["llm_verified"]``.
    """
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))

    llm: ILLMProvider | None = getattr(request.app.state, "llm", None)
    if llm is not None:
        try:
            providers["llm_verified"] = await asyncio.wait_for(
                llm.validate_credentials(), timeout=_HEALTH_CHECK_TIMEOUT
            )
        except (asyncio.TimeoutError, YodoError) as exc:
            _logger.warning("llm_health_check_failed", error=str(exc) or type(exc).__name__)
            providers["llm_verified"] = False

    llm_ok = providers.get("llm_available", False) and providers.get("llm_verified", True)
    status = "healthy" if llm_ok else "degraded"
    return HealthResponse(status=status, version=__version__, providers=providers)
