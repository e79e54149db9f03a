from __future__ import annotations

import math

import pytest

from gov_metadata.core.models import UNDEFINED
from gov_metadata.normalization.sanitizer import is_json_value, sanitize, sanitize_mapping


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        0,
        -12,
        1.5,
        "",
        "plain text",
        [],
        {},
        [1, "two", None, False, {"nested": [3.25]}],
        {"body": {"givenName": "Alice", "references": [{"label": "site", "uri": "https://a.io"}]}},
    ],
)
def test_sanitize_is_idempotent_for_json_values(value) -> None:
    once = sanitize(value)
    assert once == value
    assert sanitize(once) == once


def test_sanitize_rejects_whole_array_when_one_element_fails() -> None:
    assert sanitize([1, "ok", object()]) is UNDEFINED
    assert sanitize([1, "ok", math.nan]) is UNDEFINED
    assert sanitize({"tags": ["a", lambda: None]}) == {}


def test_sanitize_prunes_invalid_object_values_only() -> None:
    result = sanitize({"a": 1, "b": lambda: None, "c": math.inf, "d": {"e": set()}})

    assert result == {"a": 1, "d": {}}


def test_sanitize_drops_non_string_keys() -> None:
    assert sanitize({1: "one", "two": 2}) == {"two": 2}


def test_sanitize_returns_fresh_containers() -> None:
    original = {"items": (1, 2)}
    result = sanitize(original)

    assert result == {"items": [1, 2]}
    assert result is not original


def test_sanitize_rejects_cyclic_containers() -> None:
    looping: dict = {"name": "loop"}
    looping["self"] = looping
    assert sanitize(looping) == {"name": "loop"}

    items: list = [1]
    items.append(items)
    assert sanitize(items) is UNDEFINED


def test_sanitize_accepts_shared_non_cyclic_children() -> None:
    shared = {"v": 1}
    assert sanitize({"a": shared, "b": shared}) == {"a": {"v": 1}, "b": {"v": 1}}


def test_undefined_is_falsy_singleton() -> None:
    assert not UNDEFINED
    assert type(UNDEFINED)() is UNDEFINED
    assert repr(UNDEFINED) == "UNDEFINED"


def test_helpers_expose_validity_and_objects() -> None:
    assert is_json_value({"a": [1]})
    assert not is_json_value(b"bytes")
    assert sanitize_mapping({"a": 1, "b": object()}) == {"a": 1}
    assert sanitize_mapping([1, 2]) is None
