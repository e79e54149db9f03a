"""Recursive validation of decoded values into strict JSON trees."""

from __future__ import annotations

import math
from typing import Any, Mapping

from gov_metadata.core.models import UNDEFINED, JsonValue, Undefined

_PRIMITIVES = (str, bool, int)


def sanitize(value: Any) -> JsonValue | Undefined:
    """Return ``value`` as a strict JSON tree, or ``UNDEFINED`` when it cannot be one.

    Arrays are all-or-nothing: a single rejected element rejects the whole
    array, since dropping an entry would shift the meaning of ordered lists.
    Objects are pruned instead: a rejected value only removes its own key.
    Containers reachable from themselves are rejected at the point the cycle
    closes.
    """
    return _sanitize(value, set())


def is_json_value(value: Any) -> bool:
    return sanitize(value) is not UNDEFINED


def sanitize_mapping(value: Any) -> dict[str, JsonValue] | None:
    """Sanitize ``value`` and return it only when the result is a JSON object."""
    sanitized = sanitize(value)
    if isinstance(sanitized, dict):
        return sanitized
    return None


def _sanitize(value: Any, active: set[int]) -> JsonValue | Undefined:
    if value is None or isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else UNDEFINED
    if isinstance(value, (list, tuple)):
        return _sanitize_array(value, active)
    if isinstance(value, Mapping):
        return _sanitize_object(value, active)
    return UNDEFINED


def _sanitize_array(value: list[Any] | tuple[Any, ...], active: set[int]) -> list[JsonValue] | Undefined:
    marker = id(value)
    if marker in active:
        return UNDEFINED
    active.add(marker)
    try:
        result: list[JsonValue] = []
        for entry in value:
            sanitized = _sanitize(entry, active)
            if sanitized is UNDEFINED:
                return UNDEFINED
            result.append(sanitized)
        return result
    finally:
        active.discard(marker)


def _sanitize_object(value: Mapping[Any, Any], active: set[int]) -> dict[str, JsonValue] | Undefined:
    marker = id(value)
    if marker in active:
        return UNDEFINED
    active.add(marker)
    try:
        result: dict[str, JsonValue] = {}
        for key, entry in value.items():
            if not isinstance(key, str):
                continue
            sanitized = _sanitize(entry, active)
            if sanitized is UNDEFINED:
                continue
            result[key] = sanitized
        return result
    finally:
        active.discard(marker)
