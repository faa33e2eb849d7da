"""Defensive JSON decoding for generated text.

The enhancement prompts run the model at very high temperature, and even in
JSON mode the output is occasionally malformed: a stray byte-order mark, a
markdown fence, a trailing comma.  :func:`decode` tries the text as-is,
then once more after the :data:`REPAIRS` pipeline, and otherwise hands back
the caller's fallback.  It never raises.

Each repair is a small named function so it can be tested on its own, and
``REPAIRS`` fixes their order.  Truncated output is deliberately left alone;
guessing at missing structure produces plausible-looking wrong data.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable

from yodo.utils.errors import DecodeError
from yodo.utils.logging import get_logger

_logger = get_logger(__name__)

# Matches a markdown code fence (```json ... ``` or ``` ... ```) around the
# whole payload.  DOTALL lets the capture span lines.
_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)

# C0 controls and DEL, minus tab, newline and carriage return.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# A JSON string literal is matched first and kept whole, so a comma before a
# closing bracket is only removed outside of strings.
_TRAILING_COMMA_RE = re.compile(r'("(?:\\.|[^"\\])*")|,\s*([}\]])')

_BOM = "\ufeff"


def strip_bom_and_whitespace(text: str) -> str:
    # Only a leading BOM is an encoding artifact; one inside the payload is data.
    return text.strip().lstrip(_BOM).strip()


def strip_code_fences(text: str) -> str:
    match = _FENCE_RE.match(text.strip())
    if match:
        return match.group(1).strip()
    return text


def strip_control_characters(text: str) -> str:
    return _CONTROL_CHARS_RE.sub("", text)


def _drop_trailing_comma(match: re.Match[str]) -> str:
    return match.group(1) or match.group(2)


def remove_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(_drop_trailing_comma, text)


def normalize_escaped_single_quotes(text: str) -> str:
    # \' is not a legal JSON escape.
    return text.replace("\\'", "'")


REPAIRS: tuple[Callable[[str], str], ...] = (
    strip_bom_and_whitespace,
    strip_code_fences,
    strip_control_characters,
    remove_trailing_commas,
    normalize_escaped_single_quotes,
)


def repair(text: str) -> str:
    """Apply every step of :data:`REPAIRS` to *text*, in order."""
    for step in REPAIRS:
        text = step(text)
    return text


def decode_strict(raw_text: str) -> Any:
    """Decode *raw_text*, repairing once if needed.

    Raises
    ------
    DecodeError
        If the text is not a string or is not valid JSON even after repair.
    """
    if not isinstance(raw_text, str):
        raise DecodeError(f"expected str, got {type(raw_text).__name__}")
    try:
        return json.loads(raw_text)
    except ValueError:
        pass
    try:
        return json.loads(repair(raw_text))
    except ValueError as exc:
        raise DecodeError(f"invalid JSON after repair: {exc}") from exc


def decode(raw_text: Any, fallback: Any) -> Any:
    """Decode generated text, returning *fallback* instead of raising."""
    try:
        return decode_strict(raw_text)
    except DecodeError as exc:
        preview = raw_text[:120] if isinstance(raw_text, str) else repr(raw_text)[:120]
        _logger.warning("json_decode_fallback", error=exc.message, preview=preview)
        return fallback
