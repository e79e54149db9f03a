from __future__ import annotations

import json

import pytest

from gov_metadata.normalization.byte_strings import clean_hex, decode_byte_string


def _encode(value, prefix: str = "\\x") -> str:
    return prefix + json.dumps(value).encode("utf-8").hex()


def test_decode_round_trips_escaped_json() -> None:
    payload = {"name": "X", "references": [{"label": "Site", "uri": "https://x.io"}]}

    assert decode_byte_string(_encode(payload)) == payload


def test_decode_accepts_literal_escape_prefix() -> None:
    assert decode_byte_string(r"\x7b226e616d65223a2258227d") == {"name": "X"}


@pytest.mark.parametrize("prefix", ["", "0x", "0X"])
def test_decode_accepts_other_prefixes(prefix: str) -> None:
    assert decode_byte_string(_encode({"title": "T"}, prefix)) == {"title": "T"}


def test_decode_strips_interior_escape_markers() -> None:
    hex_text = json.dumps({"a": 1}).encode("utf-8").hex()
    escaped = "".join(f"\\x{hex_text[i:i + 2]}" for i in range(0, len(hex_text), 2))

    assert decode_byte_string(escaped) == {"a": 1}


@pytest.mark.parametrize(
    "value",
    [
        "",
        "   ",
        r"\x",
        r"\x7b2",
        r"\x7g",
        "not hex at all",
        r"\xff",
        _encode("unterminated")[:-2],
        None,
        42,
    ],
)
def test_decode_returns_none_for_malformed_input(value) -> None:
    assert decode_byte_string(value) is None


def test_decode_rejects_text_that_is_not_json() -> None:
    assert decode_byte_string("\\x" + "hello world".encode("utf-8").hex()) is None


def test_decode_returns_scalars_as_decoded() -> None:
    assert decode_byte_string(_encode("plain")) == "plain"
    assert decode_byte_string(_encode(None)) is None


def test_clean_hex_normalises_case_and_markers() -> None:
    assert clean_hex("  \\xAbCd ") == "AbCd"
    assert clean_hex("0xabc") is None
