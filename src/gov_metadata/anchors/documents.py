"""Write-once JSON-LD anchor documents and their storage contract."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

from gov_metadata.core.constants import HASH_ALGORITHM
from gov_metadata.core.exceptions import DocumentValidationError
from gov_metadata.core.logging import get_logger
from gov_metadata.core.models import UNDEFINED, AnchorUpload, StorageProvider
from gov_metadata.normalization.sanitizer import sanitize

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AnchorDocument:
    """Serialized JSON-LD document; the payload string is the only stored state."""

    standard: str
    payload: str

    @classmethod
    def assemble(
        cls,
        standard: str,
        context: Mapping[str, Any],
        body: Mapping[str, Any],
        *,
        authors: Iterable[Mapping[str, Any]] = (),
    ) -> "AnchorDocument":
        document = {
            "@context": context,
            "hashAlgorithm": HASH_ALGORITHM,
            "authors": list(authors),
            "body": body,
        }
        sanitized = sanitize(document)
        if sanitized is UNDEFINED or sanitized != document:
            raise DocumentValidationError(f"{standard} document contains non-JSON values")
        return cls(standard=standard, payload=_serialize(sanitized))

    def as_dict(self) -> dict[str, Any]:
        return json.loads(self.payload)

    @property
    def body(self) -> dict[str, Any]:
        return self.as_dict()["body"]

    def to_json(self) -> str:
        return self.payload

    def to_bytes(self) -> bytes:
        return self.payload.encode("utf-8")

    def content_hash(self) -> str:
        """blake2b-256 digest of the serialized document, hex encoded."""
        return hashlib.blake2b(self.to_bytes(), digest_size=32).hexdigest()


@dataclass(frozen=True, slots=True)
class RationaleDocument(AnchorDocument):
    """Vote rationale (CIP-108 or CIP-136)."""


@dataclass(frozen=True, slots=True)
class DRepProfileDocument(AnchorDocument):
    """DRep registration metadata (CIP-119)."""


class StorageSink(Protocol):
    """Pins a serialized document and returns its content-addressed location."""

    async def store(self, document: str, provider: StorageProvider) -> AnchorUpload: ...


async def publish_anchor(
    document: AnchorDocument,
    sink: StorageSink,
    provider: StorageProvider,
) -> AnchorUpload:
    """Hand ``document`` to ``sink`` and return the anchor to submit on-chain."""
    LOGGER.info(
        "anchor.publish",
        standard=document.standard,
        provider=provider,
        size=len(document.to_bytes()),
    )
    upload = await sink.store(document.to_json(), provider)
    LOGGER.info("anchor.published", standard=document.standard, url=upload.url)
    return upload


def schema_errors(validator: Draft7Validator, instance: Any) -> list[str]:
    """Return readable messages for every schema violation in ``instance``."""
    errors = sorted(validator.iter_errors(instance), key=lambda error: [str(part) for part in error.absolute_path])
    return [_describe(error) for error in errors]


def _describe(error: ValidationError) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    if error.validator == "required":
        missing = error.message.split("'")[1] if "'" in error.message else error.message
        field = f"{path}.{missing}" if path else missing
        return f"{field} is required"
    if error.validator == "maxLength":
        return f"{path} exceeds {error.validator_value} characters"
    if error.validator == "minLength" or (error.validator == "pattern" and error.validator_value == r"\S"):
        return f"{path} must not be blank"
    if error.validator == "pattern":
        return f"{path} is malformed"
    if error.validator == "type":
        return f"{path} must be of type {error.validator_value}"
    if error.validator == "additionalProperties":
        return f"{path or 'body'} has unexpected fields"
    return f"{path or 'body'}: {error.message}"


def _serialize(document: Any) -> str:
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"))


def has_content(value: Any) -> bool:
    """True for any value except ``None`` and blank strings."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
