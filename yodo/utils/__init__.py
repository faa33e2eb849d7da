"""Utility modules for yodo.

- **errors** -- Domain exception hierarchy rooted at YodoError.
- **concurrency** -- asyncio fan-out helpers for parallel upstream calls.
- **logging** -- structlog setup: coloured console output in development,
  structured JSON in production.
"""

from yodo.utils.concurrency import gather_lists, throttled_gather
from yodo.utils.errors import (
    ConfigurationError,
    ContentSourceError,
    DecodeError,
    EmptyFeedError,
    InvalidLimitError,
    LLMError,
    RateLimitError,
    YodoError,
)
from yodo.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "ContentSourceError",
    "DecodeError",
    "EmptyFeedError",
    "InvalidLimitError",
    "LLMError",
    "RateLimitError",
    "YodoError",
    "configure_logging",
    "gather_lists",
    "get_logger",
    "throttled_gather",
]
