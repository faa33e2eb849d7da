"""Custom exception hierarchy for yodo.

All application exceptions inherit from :class:`YodoError`, which carries an
optional ``provider_name`` so error handlers can identify which external
service (e.g. "openai", "reddit") caused the failure.

    YodoError  (base -- catch-all for any yodo error)
    +-- ContentSourceError       (content channel fetch failed)
    +-- LLMError                 (any LLM API call failure)
    +-- RateLimitError           (provider rate-limit exceeded)
    +-- DecodeError              (generated text could not be decoded)
    +-- EmptyFeedError           (content source yielded zero usable items)
    +-- InvalidLimitError        (feed batch size outside the accepted range)
    +-- ConfigurationError       (startup / missing config)

Adapters catch the upstream-facing errors and degrade to defaults.  Only
:class:`EmptyFeedError` and :class:`InvalidLimitError` reach the route layer
on purpose: an empty feed has no meaningful static fallback, and a limit the
service refuses to key on is a client error.
"""


class YodoError(Exception):
    """Base exception for all yodo errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[openai] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------


class ContentSourceError(YodoError):
    """Raised when a content channel cannot be fetched or parsed."""

    def __init__(
        self,
        message: str = "Content source fetch failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(YodoError):
    """Raised when an API rate limit is exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(YodoError):
    """Raised when an LLM API call fails or returns an empty response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Generated content / feed errors
# ---------------------------------------------------------------------------


class DecodeError(YodoError):
    """Raised when generated text is not valid JSON even after repair."""

    def __init__(
        self,
        message: str = "Generated content could not be decoded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmptyFeedError(YodoError):
    """Raised when the content source returns no items with usable images."""

    def __init__(
        self,
        message: str = "No posts found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidLimitError(YodoError):
    """Raised when a requested feed size is outside ``[1, feed_max_limit]``."""

    def __init__(
        self,
        message: str = "Feed limit out of range",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class ConfigurationError(YodoError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
