"""Concurrency helpers for fanning out upstream calls.

``throttled_gather`` is a drop-in replacement for ``asyncio.gather`` that
wraps each awaitable in a semaphore acquire/release so a burst of channel
fetches stays under the content source's rate limit.  ``gather_lists`` is
the fan-out / merge pattern used by the content provider: run N list
producing calls, log failures, and return the flattened successes.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, TypeVar

import structlog

from yodo.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore`` slots at a time.

    With no semaphore the awaitables simply run concurrently.  Results are
    returned in input order; exceptions are returned in place when
    ``return_exceptions`` is true, mirroring ``asyncio.gather``.
    """

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        if semaphore is None:
            return await coro
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)


async def gather_lists(
    coros: list[Awaitable[list[Any]]],
    labels: list[str],
    semaphore: asyncio.Semaphore | None = None,
    logger: structlog.BoundLogger | None = None,
    error_msg: str = "fan_out_call_failed",
) -> list[Any]:
    """Run list-returning calls concurrently and flatten the successes.

    A failing call is logged with its label and contributes nothing; it
    never aborts the others.
    """
    if logger is None:
        logger = _logger

    raw_results = await throttled_gather(coros, semaphore=semaphore, return_exceptions=True)

    merged: list[Any] = []
    for label, result in zip(labels, raw_results):
        if isinstance(result, BaseException):
            logger.warning(error_msg, source=label, error=str(result))
        elif isinstance(result, list):
            merged.extend(result)
    return merged
