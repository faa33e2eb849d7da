"""Preview one feed batch and theme from the command line.

Usage::

    python -m yodo.cli.preview
    python -m yodo.cli.preview --limit 5
    python -m yodo.cli.preview --json > batch.json

Builds the same components as the web app, runs a single refresh (feed and
theme concurrently), and prints a readable summary or JSON to stdout.
Exits 1 when the feed half fails.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from typing import Any

from yodo.services.feed_service import RefreshResult
from yodo.utils.errors import InvalidLimitError


def _format_text_output(result: RefreshResult) -> str:
    lines: list[str] = []
    sep = "=" * 60

    lines.append(sep)
    lines.append("  yodo -- Feed Preview")
    lines.append(sep)
    lines.append("")

    if result.theme is not None:
        theme = result.theme.theme
        lines.append("THEME")
        lines.append("-" * 40)
        lines.append(f"  Mood:       {theme.mood}")
        lines.append(
            f"  Colors:     {theme.primary_color} / {theme.secondary_color} / "
            f"{theme.accent_color} on {theme.background_color}"
        )
        lines.append(f"  Font:       {theme.font_family}  (radius {theme.border_radius})")
        lines.append(f"  Layout:     {theme.layout_style.value}  |  Animation: {theme.animation.value}")
        lines.append("")

    if result.feed is not None:
        lines.append(f"POSTS ({result.feed.count})")
        lines.append("-" * 40)
        for idx, item in enumerate(result.feed.items, start=1):
            lines.append(f"\n  {idx}. r/{item.subreddit}: {item.title[:80]}")
            lines.append(f"     {item.caption}")
            lines.append(f"     -- {item.personality} [{item.mood}]")
            lines.append(f"     {item.image_url}")
        lines.append("")

    for name, message in result.errors.items():
        lines.append(f"  ! {name}: {message}")

    return "\n".join(lines)


def _format_json_output(result: RefreshResult) -> str:
    output: dict[str, Any] = {"errors": result.errors}
    if result.feed is not None:
        output["posts"] = [item.model_dump(mode="json", by_alias=True) for item in result.feed.items]
        output["count"] = result.feed.count
    if result.theme is not None:
        output["theme"] = result.theme.theme.model_dump(mode="json", by_alias=True)
    return json.dumps(output, indent=2, default=str)


def _suppress_logs() -> None:
    """Send structlog and stdlib logging to stderr at WARNING+.

    Runs before any logger is used, since structlog caches loggers on
    first use.
    """
    import os

    from yodo.utils.logging import configure_logging

    os.environ["LOG_LEVEL"] = "WARNING"
    configure_logging(log_level="WARNING", service="yodo-preview", stream=sys.stderr)


async def _run(limit: int, json_output: bool, quiet: bool) -> int:
    from yodo.main import _build_all, settings

    if quiet:
        # Importing yodo.main reconfigures logging for the web app.
        _suppress_logs()

    components = _build_all(settings)
    feed_service = components["feed_service"]

    print(f"Fetching {limit} posts via {components['primary_llm_name']}...", file=sys.stderr)
    start = time.monotonic()
    try:
        result = await feed_service.refresh(limit)
    except InvalidLimitError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    finally:
        await components["http_client"].aclose()
    print(f"Done in {time.monotonic() - start:.1f}s", file=sys.stderr)

    text = _format_json_output(result) if json_output else _format_text_output(result)
    print(text)
    return 0 if result.feed is not None else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m yodo.cli.preview",
        description="Fetch, caption and theme one feed batch from the command line.",
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=15,
        help="Number of posts to fetch (default: 15).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output (implied by --json).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.limit < 1:
        parser.error("--limit must be at least 1")

    quiet = args.quiet or args.json_output
    if quiet:
        _suppress_logs()

    sys.exit(asyncio.run(_run(args.limit, args.json_output, quiet)))


if __name__ == "__main__":
    main()
