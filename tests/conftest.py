"""Shared pytest fixtures for the yodo test suite."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from yodo.config.settings import Settings
from yodo.interfaces.llm_provider import ILLMProvider
from yodo.models.content import ContentItem
from yodo.models.theme import VisualTheme


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_settings(**overrides: Any) -> Settings:
    """Settings with no API keys and no .env influence beyond *overrides*."""
    defaults: dict[str, Any] = {
        "openai_api_key": "",
        "openai_base_url": "",
        "openai_text_model": "",
        "anthropic_api_key": "",
        "ollama_base_url": "http://localhost:11434",
        "app_env": "test",
        "llm_timeout_seconds": 2.0,
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def make_item(idx: int = 1, **overrides: Any) -> ContentItem:
    data: dict[str, Any] = {
        "id": f"post{idx}",
        "title": f"A strange thing number {idx}",
        "author": f"user{idx}",
        "subreddit": "hmmm",
        "url": f"https://i.redd.it/img{idx}.jpg",
        "image_url": f"https://i.redd.it/img{idx}.jpg",
        "thumbnail": None,
        "score": 100 + idx,
        "num_comments": idx,
        "created": 1_700_000_000.0 + idx,
        "permalink": f"https://reddit.com/r/hmmm/comments/post{idx}/",
        "is_video": False,
    }
    data.update(overrides)
    return ContentItem(**data)


def make_reddit_post(idx: int = 1, **overrides: Any) -> dict[str, Any]:
    """A raw listing post as returned inside ``data.children[].data``."""
    post: dict[str, Any] = {
        "id": f"abc{idx}",
        "title": f"Found this in my attic {idx}",
        "author": f"redditor{idx}",
        "subreddit": "WhatIsThisThing",
        "url": f"https://i.redd.it/pic{idx}.png",
        "thumbnail": f"https://b.thumbs.redditmedia.com/t{idx}.jpg",
        "score": 42,
        "num_comments": 7,
        "created_utc": 1_700_000_000.0,
        "permalink": f"/r/WhatIsThisThing/comments/abc{idx}/found_this/",
        "is_self": False,
        "is_video": False,
        "is_gallery": False,
        "over_18": False,
    }
    post.update(overrides)
    return post


def make_listing(posts: list[dict[str, Any]]) -> dict[str, Any]:
    return {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": p} for p in posts]}}


VALID_THEME_JSON: dict[str, Any] = {
    "primaryColor": "#ff00ff",
    "secondaryColor": "#00FFFF",
    "accentColor": "#FF0",
    "backgroundColor": "#000000",
    "textColor": "#00FF00",
    "fontFamily": "Papyrus",
    "borderRadius": "69%",
    "layoutStyle": "Masonry",
    "mood": "neon vomit",
    "animation": "GLITCHY",
}


def captions_json(count: int, *, skip: set[int] | None = None) -> str:
    skip = skip or set()
    posts = [
        {
            "index": i,
            "caption": f"caption {i}",
            "personality": f"persona {i}",
            "mood": f"mood {i}",
        }
        for i in range(1, count + 1)
        if i not in skip
    ]
    return json.dumps({"posts": posts})


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo per-test logging setup so no test keeps a closed capture stream."""
    saved_config = structlog.get_config()
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    saved_noisy = {name: logging.getLogger(name).level for name in ("httpx", "httpcore")}

    yield

    structlog.configure(**saved_config)
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    for name, level in saved_noisy.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def sample_items() -> list[ContentItem]:
    return [make_item(i) for i in range(1, 16)]


@pytest.fixture
def valid_theme() -> VisualTheme:
    return VisualTheme.model_validate(VALID_THEME_JSON)


@pytest.fixture
def mock_llm() -> MagicMock:
    """An ILLMProvider mock; set ``complete`` side effects per test."""
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value="{}")
    llm.get_provider_name.return_value = "mock-llm"
    llm.is_available.return_value = True
    return llm


@pytest.fixture
def llm_router(mock_llm: MagicMock) -> Callable[..., MagicMock]:
    """Route ``complete`` calls by prompt: theme prompts vs caption prompts."""

    def _configure(*, captions: Any = None, theme: Any = None) -> MagicMock:
        async def _complete(system_prompt: str, user_prompt: str, **kwargs: Any) -> str:
            target = theme if "primaryColor" in user_prompt else captions
            if isinstance(target, BaseException):
                raise target
            if callable(target):
                return target(user_prompt)
            return target

        mock_llm.complete = AsyncMock(side_effect=_complete)
        return mock_llm

    return _configure
