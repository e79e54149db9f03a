from __future__ import annotations

import hashlib
import json

import pytest

from gov_metadata.anchors import AnchorDocument, build_rationale, publish_anchor
from gov_metadata.anchors.documents import has_content
from gov_metadata.core.exceptions import DocumentValidationError
from gov_metadata.core.models import AnchorUpload, StorageProvider


class FakeStorageSink:
    def __init__(self) -> None:
        self.stored: list[tuple[str, StorageProvider]] = []

    async def store(self, document: str, provider: StorageProvider) -> AnchorUpload:
        self.stored.append((document, provider))
        digest = hashlib.blake2b(document.encode("utf-8"), digest_size=32).hexdigest()
        return AnchorUpload(url=f"ipfs://{digest[:16]}", hash=digest)


def _rationale():
    return build_rationale({"summary": "Résumé", "rationaleStatement": "Because."})


def test_serialization_is_compact_and_keeps_unicode() -> None:
    document = _rationale()
    text = document.to_json()

    assert "Résumé" in text
    assert ": " not in text
    assert json.loads(text) == document.as_dict()


def test_content_hash_is_blake2b_256_of_payload() -> None:
    document = _rationale()

    expected = hashlib.blake2b(document.to_bytes(), digest_size=32).hexdigest()
    assert document.content_hash() == expected
    assert len(document.content_hash()) == 64


def test_as_dict_returns_independent_copies() -> None:
    document = _rationale()
    first = document.as_dict()
    first["body"]["summary"] = "mutated"

    assert document.body["summary"] == "Résumé"


def test_assemble_rejects_non_json_values() -> None:
    with pytest.raises(DocumentValidationError):
        AnchorDocument.assemble("CIP136", {}, {"summary": float("nan")})


@pytest.mark.anyio
async def test_publish_anchor_hands_serialized_document_to_sink() -> None:
    document = _rationale()
    sink = FakeStorageSink()

    upload = await publish_anchor(document, sink, "pinata")

    assert sink.stored == [(document.to_json(), "pinata")]
    assert upload.hash == document.content_hash()


def test_has_content_treats_blank_strings_as_empty() -> None:
    assert not has_content(None)
    assert not has_content("  \n")
    assert has_content("text")
    assert has_content(0)
    assert has_content(False)
