"""Canonical profile extraction from heterogeneous governance metadata.

Several metadata standards (CIP-100, CIP-108, CIP-119 and older ad-hoc
layouts) circulate at the same time and indexers surface them with
inconsistent wrapper nesting. Extraction therefore walks every known body
location, then the flat layouts, filling each canonical field from the first
location and synonym that yields a usable value:

* body locations, in order: ``body``, ``json_metadata.body``, ``extra.body``,
  ``extra.json_metadata.body``
* flat locations, in order: the payload itself, ``extra``, ``json_metadata``
* hex ``bytes`` as a last resort, only while neither name nor title resolved

Within one location the synonym order of ``FIELD_RULES`` applies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from gov_metadata.core.models import CanonicalProfile

from .byte_strings import decode_byte_string
from .references import normalize_references
from .shapes import body_locations, encoded_bytes, flat_locations

DEFAULT_BYTES_FALLBACK_DEPTH = 2
IMAGE_URL_KEYS: tuple[str, ...] = ("contentUrl", "url", "href", "image")
CIP_REFERENCE_PATTERN = re.compile(r"^CIP\d+:", re.IGNORECASE)
_MAX_NESTING = 4


def read_text(value: Any, _depth: int = 0) -> str | None:
    """Return a trimmed, non-empty display string from ``value``.

    JSON-LD literal objects (``{"@value": ...}``) and lists of candidates are
    unwrapped; vocabulary references such as ``CIP119:givenName`` are not
    values and are skipped.
    """
    if _depth > _MAX_NESTING:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text or CIP_REFERENCE_PATTERN.match(text):
            return None
        return text
    if isinstance(value, (list, tuple)):
        for entry in value:
            text = read_text(entry, _depth + 1)
            if text:
                return text
        return None
    if isinstance(value, Mapping):
        for key in ("@value", "value"):
            if key in value:
                text = read_text(value[key], _depth + 1)
                if text:
                    return text
    return None


def read_image(value: Any, _depth: int = 0) -> str | None:
    """Resolve an image URL from a plain string or an ImageObject-like mapping."""
    if _depth > _MAX_NESTING:
        return None
    if isinstance(value, str):
        return read_text(value)
    if isinstance(value, Mapping):
        for key in IMAGE_URL_KEYS:
            url = read_image(value.get(key), _depth + 1)
            if url:
                return url
    return None


def read_passage(value: Any) -> str | None:
    """Read a free-text section; list entries are joined as paragraphs."""
    if isinstance(value, (list, tuple)):
        parts = [text for text in (read_text(entry, 1) for entry in value) if text]
        return "\n\n".join(parts) or None
    return read_text(value)


def read_boolean(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def read_references(value: Any) -> tuple | None:
    references = normalize_references(value)
    return tuple(references) or None


@dataclass(frozen=True, slots=True)
class FieldRule:
    """One canonical field, the keys it may appear under, and how to read them."""

    field: str
    keys: tuple[str, ...]
    read: Callable[[Any], Any]

    def resolve(self, source: Mapping[str, Any]) -> Any:
        for key in self.keys:
            if key not in source:
                continue
            value = self.read(source[key])
            if value is not None:
                return value
        return None


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("name", ("name", "givenName"), read_text),
    FieldRule("title", ("title", "givenName"), read_text),
    FieldRule("description", ("description", "abstract"), read_text),
    FieldRule("website", ("website", "url"), read_text),
    FieldRule("image", ("image", "logo", "picture"), read_image),
    FieldRule("email", ("email",), read_text),
    FieldRule("twitter", ("twitter",), read_text),
    FieldRule("github", ("github",), read_text),
    FieldRule("payment_address", ("paymentAddress",), read_text),
    FieldRule("objectives", ("objectives",), read_passage),
    FieldRule("motivations", ("motivations",), read_passage),
    FieldRule("qualifications", ("qualifications",), read_passage),
    FieldRule("do_not_list", ("doNotList",), read_boolean),
    FieldRule("references", ("references",), read_references),
)


def merge_fields(source: Mapping[str, Any], accumulated: dict[str, Any]) -> None:
    """Fill fields still missing from ``accumulated`` using ``source``."""
    for rule in FIELD_RULES:
        if rule.field in accumulated:
            continue
        value = rule.resolve(source)
        if value is not None:
            accumulated[rule.field] = value


def extract_profile(raw: Any, *, bytes_depth: int | None = None) -> CanonicalProfile | None:
    """Build a canonical profile from ``raw`` metadata, or ``None`` if nothing is usable."""
    depth = DEFAULT_BYTES_FALLBACK_DEPTH if bytes_depth is None else max(bytes_depth, 0)
    fields = _extract_fields(raw, depth)
    if not fields:
        return None
    return CanonicalProfile.from_fields(fields)


def _extract_fields(raw: Any, bytes_depth: int) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        return {}
    accumulated: dict[str, Any] = {}
    for _shape, body in body_locations(raw):
        merge_fields(body, accumulated)
    for _shape, flat in flat_locations(raw):
        merge_fields(flat, accumulated)

    if "name" not in accumulated and "title" not in accumulated and bytes_depth > 0:
        encoded = encoded_bytes(raw)
        if encoded is not None:
            decoded = _extract_fields(decode_byte_string(encoded), bytes_depth - 1)
            for key, value in decoded.items():
                accumulated.setdefault(key, value)

    _fill_website_from_references(accumulated)
    return accumulated


def _fill_website_from_references(accumulated: dict[str, Any]) -> None:
    if "website" in accumulated:
        return
    references = accumulated.get("references") or ()
    for reference in references:
        label = reference.label.lower()
        if "website" in label or "site" in label:
            accumulated["website"] = reference.uri
            return
    for reference in references:
        if reference.type == "Link" and reference.uri.startswith(("http://", "https://")):
            accumulated["website"] = reference.uri
            return
