"""Reddit content provider.

Implements IContentProvider against the public ``hot.json`` listings, which
need no authentication.  ``old.reddit.com`` is used because the main host
answers unauthenticated JSON requests with 403 more often.

Each fetch samples a handful of channels at random, pulls them concurrently,
and keeps only posts that resolve to a displayable image.  A channel that
errors, times out or returns garbage contributes nothing; it never fails the
batch.
"""

from __future__ import annotations

import asyncio
import html
import math
import random
import re
from typing import Any

import httpx

from yodo.config.settings import Settings
from yodo.interfaces.content_provider import IContentProvider
from yodo.models.content import ContentItem
from yodo.utils.concurrency import gather_lists
from yodo.utils.errors import ContentSourceError
from yodo.utils.logging import get_logger

_IMAGE_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)
_IMGUR_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)
_PLACEHOLDER_THUMBNAILS = frozenset({"self", "default"})
_MAX_CONCURRENT_FETCHES = 5

# Used when config/config.yaml does not list any channels.
DEFAULT_CHANNELS: tuple[str, ...] = (
    "hmmm",
    "interdimensionalcable",
    "WhatIsThisThing",
    "CrappyDesign",
    "ATBGE",
    "blursedimages",
    "oddlysatisfying",
    "mildlyinteresting",
    "NotMyJob",
    "Pareidolia",
    "StockPhotos",
    "oddlyspecific",
    "BrandNewSentence",
    "me_irl",
    "surrealmemes",
    "cursedcomments",
    "BeAmazed",
    "Damnthatsinteresting",
    "DidntKnowIWantedThat",
    "blackmagicfuckery",
)


def is_image_url(url: str) -> bool:
    return bool(_IMAGE_EXT_RE.search(url))


def extract_image_url(post: dict[str, Any]) -> str | None:
    """Resolve the best displayable image URL for a raw listing post.

    Order: direct image link, preview source (HTML entities decoded),
    imgur single-image link, ``i.redd.it`` link.  Returns ``None`` when the
    post has no usable image.
    """
    url = post.get("url") or ""

    if url and is_image_url(url):
        return url

    try:
        preview_url = post["preview"]["images"][0]["source"]["url"]
    except (KeyError, IndexError, TypeError):
        preview_url = None
    if preview_url:
        return html.unescape(preview_url)

    if "imgur.com" in url and "/a/" not in url and "/gallery/" not in url:
        if not _IMGUR_EXT_RE.search(url):
            return f"{url}.jpg"
        return url

    if "i.redd.it" in url:
        return url

    return None


def transform_post(post: dict[str, Any]) -> ContentItem | None:
    """Map a raw listing post to a :class:`ContentItem`, or ``None`` to skip it."""
    if post.get("is_self") or post.get("is_video") or post.get("is_gallery"):
        return None
    if post.get("over_18"):
        return None

    image_url = extract_image_url(post)
    if not image_url:
        return None

    thumbnail = post.get("thumbnail")
    if thumbnail in _PLACEHOLDER_THUMBNAILS or not thumbnail:
        thumbnail = None

    return ContentItem(
        id=str(post.get("id", "")),
        title=post.get("title") or "",
        author=post.get("author") or "",
        subreddit=post.get("subreddit") or "",
        url=post.get("url") or "",
        image_url=image_url,
        thumbnail=thumbnail,
        score=int(post.get("score") or 0),
        num_comments=int(post.get("num_comments") or 0),
        created=float(post.get("created_utc") or 0.0),
        permalink=f"https://reddit.com{post.get('permalink', '')}",
        is_video=bool(post.get("is_video", False)),
    )


class RedditContentProvider(IContentProvider):
    """Content provider backed by public subreddit listings.

    The ``httpx.AsyncClient`` is injected so the process shares one
    connection pool and tests can swap in a ``MockTransport``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        channels: list[str] | tuple[str, ...] = DEFAULT_CHANNELS,
        rng: random.Random | None = None,
    ) -> None:
        self._http = http_client
        self._base_url = settings.reddit_base_url.rstrip("/")
        self._user_agent = settings.reddit_user_agent
        self._channels_per_fetch = max(1, settings.channels_per_fetch)
        self._channels = list(channels)
        self._rng = rng or random.Random()
        self._semaphore = asyncio.Semaphore(_MAX_CONCURRENT_FETCHES)
        self._logger = get_logger(__name__)

    @property
    def channels(self) -> list[str]:
        return list(self._channels)

    def random_channel(self) -> str:
        """Pick one configured channel at random."""
        return self._rng.choice(self._channels)

    def _pick_channels(self, count: int) -> list[str]:
        return self._rng.sample(self._channels, count)

    async def fetch_items(self, limit: int) -> list[ContentItem]:
        if limit <= 0 or not self._channels:
            return []

        channel_count = min(self._channels_per_fetch, len(self._channels))
        per_channel = math.ceil(limit / channel_count)
        selected = self._pick_channels(channel_count)

        items: list[ContentItem] = await gather_lists(
            [self._fetch_channel(name, per_channel) for name in selected],
            labels=selected,
            semaphore=self._semaphore,
            logger=self._logger,
            error_msg="reddit_channel_failed",
        )

        self._rng.shuffle(items)
        result = items[:limit]
        self._logger.info(
            "reddit_fetch_complete",
            channels=selected,
            candidates=len(items),
            returned=len(result),
        )
        return result

    async def _fetch_channel(self, name: str, limit: int) -> list[ContentItem]:
        """Fetch up to *limit* usable items from one channel.

        Requests twice as many posts as needed because most of a listing is
        filtered out.
        """
        url = f"{self._base_url}/r/{name}/hot.json"
        try:
            response = await self._http.get(
                url,
                params={"limit": limit * 2},
                headers={"User-Agent": self._user_agent},
                follow_redirects=True,
            )
            if response.status_code != 200:
                self._logger.warning(
                    "reddit_channel_http_error",
                    channel=name,
                    status=response.status_code,
                )
                return []
            payload = response.json()
        except httpx.HTTPError as exc:
            raise ContentSourceError(
                message=f"r/{name} request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise ContentSourceError(
                message=f"r/{name} returned invalid JSON",
                provider_name=self.get_provider_name(),
            ) from exc

        children = _listing_children(payload)
        items: list[ContentItem] = []
        for child in children:
            post = child.get("data") if isinstance(child, dict) else None
            if not isinstance(post, dict):
                continue
            item = transform_post(post)
            if item is None:
                continue
            items.append(item)
            if len(items) >= limit:
                break
        return items

    def get_provider_name(self) -> str:
        return "reddit"


def _listing_children(payload: Any) -> list[Any]:
    if not isinstance(payload, dict):
        return []
    data = payload.get("data")
    if not isinstance(data, dict):
        return []
    children = data.get("children")
    return children if isinstance(children, list) else []
