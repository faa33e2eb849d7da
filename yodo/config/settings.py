"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. OPENAI_API_KEY=sk-abc123
  2. A ``.env`` file in the project root (local development)

Field ``openai_api_key`` maps to env var ``OPENAI_API_KEY``.  Defaults are
used when neither source sets a value.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """yodo application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === LLM Providers ===
    # Empty string = "not configured"; main.py falls through to the next provider.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, Groq, ...)
    openai_text_model: str = ""
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"

    # === Generation ===
    llm_temperature_theme: float = 1.8
    llm_temperature_captions: float = 1.9
    llm_timeout_seconds: float = 25.0

    # === Content source ===
    reddit_base_url: str = "https://old.reddit.com"
    reddit_user_agent: str = "Mozilla/5.0 (compatible; YodoLol/1.0; +https://yodo.lol)"
    channels_per_fetch: int = 5
    http_timeout_seconds: float = 10.0

    # === Cache policy ===
    feed_ttl_seconds: float = 120.0
    theme_ttl_seconds: float = 300.0
    feed_default_limit: int = 15
    feed_max_limit: int = 50

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "*"

    @model_validator(mode="after")
    def _check_cache_policy(self) -> "Settings":
        # Visual identity should feel more stable than content.
        if self.theme_ttl_seconds < self.feed_ttl_seconds:
            raise ValueError("theme_ttl_seconds must be >= feed_ttl_seconds")
        if self.feed_max_limit < 1:
            raise ValueError("feed_max_limit must be >= 1")
        if not 1 <= self.feed_default_limit <= self.feed_max_limit:
            raise ValueError("feed_default_limit must be between 1 and feed_max_limit")
        return self

    def get_available_llm_providers(self) -> list[str]:
        """Return LLM provider names that are configured, in priority order."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers

    def get_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
