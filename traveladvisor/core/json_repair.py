"""
Best-effort recovery of JSON objects from generative model output.

Model responses are supposed to be bare JSON but regularly arrive wrapped in
code fences, with typographic quotes, trailing commas or chatty preamble.
Each repair step is a separate function so it can be exercised on its own;
extract_json() chains them in a fixed order and the first parse that
succeeds wins.
"""

import json
import re
from typing import Any

_LEADING_FENCE = re.compile(r"^```[a-zA-Z]*\s*")
_TRAILING_FENCE = re.compile(r"```\s*$")
_SMART_DOUBLE_QUOTES = re.compile("[“”„‟″]")
_SMART_SINGLE_QUOTES = re.compile("[‘’‛]")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


class JSONExtractionError(ValueError):
    """No JSON value could be recovered. Keeps the raw text for diagnostics."""

    def __init__(self, raw: str, message: str = "AI returned invalid JSON") -> None:
        super().__init__(message)
        self.raw = raw


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang marker and a trailing ``` marker."""
    text = text.strip()
    text = _LEADING_FENCE.sub("", text)
    return _TRAILING_FENCE.sub("", text)


def normalize_quotes(text: str) -> str:
    """Replace typographic double/single quotes with their ASCII equivalents."""
    text = _SMART_DOUBLE_QUOTES.sub('"', text)
    return _SMART_SINGLE_QUOTES.sub("'", text)


def remove_trailing_commas(text: str) -> str:
    """Drop commas that sit directly (modulo whitespace) before } or ]."""
    return _TRAILING_COMMA.sub(r"\1", text)


def sanitize_candidate(text: str) -> str:
    return remove_trailing_commas(normalize_quotes(strip_code_fences(text)))


def try_parse(text: str) -> tuple[bool, Any]:
    """Strict parse. Returns (ok, value) so a parsed null is not mistaken for failure."""
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return False, None


def slice_braces(text: str) -> str | None:
    """Substring from the first '{' through the last '}', or None if there is no such pair."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def extract_json(text: str) -> Any:
    """
    Recover a JSON value from model output.

    Order: fence-strip, normalize, direct parse; then brace-slice the
    fence-stripped text, normalize again and parse.

    Raises:
        JSONExtractionError: nothing parseable was found
    """
    if not text:
        raise JSONExtractionError(text or "", "AI returned an empty response")

    stripped = strip_code_fences(text)

    ok, value = try_parse(sanitize_candidate(stripped))
    if ok:
        return value

    candidate = slice_braces(stripped)
    if candidate is not None:
        ok, value = try_parse(sanitize_candidate(candidate))
        if ok:
            return value

    raise JSONExtractionError(text)


def has_required_keys(payload: Any, keys: tuple[str, ...]) -> bool:
    """Presence check used in place of schema validation on model output. Empty lists count as present."""
    if not isinstance(payload, dict):
        return False
    return all(payload.get(key) is not None for key in keys)
