"""Decoding of hex-encoded metadata bytes surfaced by indexers."""

from __future__ import annotations

import json
import re
from typing import Any

from gov_metadata.core.models import UNDEFINED, JsonValue

from .sanitizer import sanitize

ESCAPE_MARKER = "\\x"
_HEX_PATTERN = re.compile(r"^[0-9a-fA-F]+$")


def clean_hex(value: str) -> str | None:
    """Strip escape markers from ``value`` and return the bare hex digits."""
    text = value.strip()
    if text.startswith(ESCAPE_MARKER):
        text = text[len(ESCAPE_MARKER) :]
    elif text[:2].lower() == "0x":
        text = text[2:]
    text = text.replace(ESCAPE_MARKER, "")
    if not text or len(text) % 2 != 0 or not _HEX_PATTERN.match(text):
        return None
    return text


def decode_byte_string(value: Any) -> JsonValue | None:
    """Decode a hex byte string into the JSON value it encodes.

    Returns ``None`` for empty input, malformed hex, invalid UTF-8 and text
    that does not parse as JSON.
    """
    if not isinstance(value, str) or not value:
        return None
    cleaned = clean_hex(value)
    if cleaned is None:
        return None
    try:
        text = bytes.fromhex(cleaned).decode("utf-8")
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    sanitized = sanitize(parsed)
    if sanitized is UNDEFINED:
        return None
    return sanitized
