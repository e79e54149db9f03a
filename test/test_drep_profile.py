from __future__ import annotations

import hashlib

import jsonschema
import pytest

from gov_metadata.anchors import build_drep_profile
from gov_metadata.core.constants import CIP119_URI
from gov_metadata.core.exceptions import ProfileDocumentError
from gov_metadata.normalization import extract_profile

DOCUMENT_SHAPE = {
    "type": "object",
    "required": ["@context", "hashAlgorithm", "body"],
    "properties": {
        "hashAlgorithm": {"const": "blake2b-256"},
        "body": {"type": "object", "required": ["givenName"]},
    },
}


def test_minimal_profile() -> None:
    document = build_drep_profile({"givenName": "  Alice  ", "objectives": "", "doNotList": False})
    payload = document.as_dict()

    jsonschema.validate(instance=payload, schema=DOCUMENT_SHAPE)
    assert payload["body"] == {"givenName": "Alice"}
    assert payload["@context"]["CIP119"] == CIP119_URI


def test_full_profile_fields() -> None:
    image_hash = hashlib.sha256(b"avatar").hexdigest()
    document = build_drep_profile(
        {
            "givenName": "Alice",
            "objectives": "Transparency",
            "motivations": "Community",
            "qualifications": "Engineer",
            "paymentAddress": "addr1qxyz",
            "doNotList": True,
            "image": "https://img.example/alice.png",
            "imageHash": image_hash,
            "references": [
                {"type": "Identity", "label": "X", "uri": "https://x.com/alice"},
                {"label": "Website", "uri": "https://alice.example"},
            ],
        }
    )
    body = document.body

    assert body["doNotList"] is True
    assert body["image"] == {
        "@type": "ImageObject",
        "contentUrl": "https://img.example/alice.png",
        "sha256": image_hash,
    }
    assert body["references"] == [
        {"@type": "Identity", "label": "X", "uri": "https://x.com/alice"},
        {"@type": "Link", "label": "Website", "uri": "https://alice.example"},
    ]


def test_published_profile_canonicalizes_back() -> None:
    document = build_drep_profile(
        {
            "givenName": "Alice",
            "image": {"contentUrl": "https://img.example/alice.png"},
            "references": [{"@type": "Link", "label": "Website", "uri": "https://alice.example"}],
        }
    )

    profile = extract_profile(document.as_dict())

    assert profile.name == "Alice"
    assert profile.image == "https://img.example/alice.png"
    assert profile.website == "https://alice.example"
    assert profile.is_present


def test_missing_given_name_is_rejected() -> None:
    with pytest.raises(ProfileDocumentError) as excinfo:
        build_drep_profile({"objectives": "No name"})

    assert excinfo.value.errors == ["givenName is required"]


def test_limits_and_hash_format_are_checked() -> None:
    with pytest.raises(ProfileDocumentError) as excinfo:
        build_drep_profile(
            {
                "givenName": "n" * 81,
                "qualifications": "q" * 1001,
                "image": "https://img.example/a.png",
                "imageHash": "not-a-digest",
            }
        )

    assert excinfo.value.errors == [
        "givenName exceeds 80 characters",
        "image.sha256 is malformed",
        "qualifications exceeds 1000 characters",
    ]
