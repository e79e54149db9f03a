"""DRep registration metadata (CIP-119)."""

from __future__ import annotations

from typing import Any, Mapping

from jsonschema import Draft7Validator

from gov_metadata.core.constants import CIP100_URI, CIP119_URI, DOCUMENT_LANGUAGE
from gov_metadata.core.exceptions import ProfileDocumentError
from gov_metadata.core.logging import get_logger
from gov_metadata.normalization.references import normalize_references

from .documents import DRepProfileDocument, has_content, schema_errors

LOGGER = get_logger(__name__)

PROFILE_STANDARD = "CIP119"
PROFILE_REFERENCE_TYPES: tuple[str, ...] = ("Link", "Identity", "Other")
PROFILE_TEXT_LIMITS: dict[str, int] = {
    "objectives": 1000,
    "motivations": 1000,
    "qualifications": 1000,
}
GIVEN_NAME_LIMIT = 80

PROFILE_CONTEXT: dict[str, Any] = {
    "@language": DOCUMENT_LANGUAGE,
    "CIP100": CIP100_URI,
    "CIP119": CIP119_URI,
    "hashAlgorithm": "CIP100:hashAlgorithm",
    "body": {
        "@id": "CIP119:body",
        "@context": {
            "references": {
                "@id": "CIP119:references",
                "@container": "@set",
                "@context": {
                    "Identity": "CIP119:IdentityReference",
                    "Link": "CIP119:LinkReference",
                    "Other": "CIP100:OtherReference",
                    "label": "CIP100:reference-label",
                    "uri": "CIP100:reference-uri",
                },
            },
            "paymentAddress": "CIP119:paymentAddress",
            "givenName": "CIP119:givenName",
            "image": {"@id": "CIP119:image", "@context": {"ImageObject": "https://schema.org/ImageObject"}},
            "objectives": "CIP119:objectives",
            "motivations": "CIP119:motivations",
            "qualifications": "CIP119:qualifications",
            "doNotList": "CIP119:doNotList",
        },
    },
}

PROFILE_BODY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["givenName"],
    "additionalProperties": False,
    "properties": {
        "givenName": {"type": "string", "pattern": r"\S", "maxLength": GIVEN_NAME_LIMIT},
        **{
            name: {"type": "string", "maxLength": limit}
            for name, limit in PROFILE_TEXT_LIMITS.items()
        },
        "paymentAddress": {"type": "string", "pattern": r"\S"},
        "doNotList": {"type": "boolean", "const": True},
        "image": {
            "type": "object",
            "required": ["@type", "contentUrl"],
            "additionalProperties": False,
            "properties": {
                "@type": {"const": "ImageObject"},
                "contentUrl": {"type": "string", "pattern": r"\S"},
                "sha256": {"type": "string", "pattern": r"^[0-9a-fA-F]{64}$"},
            },
        },
        "references": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["@type", "label", "uri"],
                "properties": {
                    "@type": {"enum": list(PROFILE_REFERENCE_TYPES)},
                    "label": {"type": "string", "minLength": 1},
                    "uri": {"type": "string", "minLength": 1},
                },
            },
        },
    },
}

_VALIDATOR = Draft7Validator(PROFILE_BODY_SCHEMA)


def build_drep_profile(fields: Mapping[str, Any]) -> DRepProfileDocument:
    """Assemble the CIP-119 registration document for ``fields``.

    ``fields`` uses the document's own keys (``givenName``, ``paymentAddress``,
    ``doNotList`` ...). ``image`` may be a URL or a mapping with ``contentUrl``
    and ``sha256``; ``imageHash`` is accepted alongside a plain URL.
    """
    body: dict[str, Any] = {}
    given_name = fields.get("givenName")
    if given_name is not None:
        body["givenName"] = given_name.strip() if isinstance(given_name, str) else given_name

    for name in PROFILE_TEXT_LIMITS:
        value = fields.get(name)
        if has_content(value):
            body[name] = value

    payment_address = fields.get("paymentAddress")
    if has_content(payment_address):
        body["paymentAddress"] = payment_address.strip() if isinstance(payment_address, str) else payment_address

    # Only an explicit opt-out is written; "false" is the default reading.
    if fields.get("doNotList") is True:
        body["doNotList"] = True

    image = _build_image(fields.get("image"), fields.get("imageHash"))
    if image is not None:
        body["image"] = image

    references = normalize_references(
        fields.get("references"),
        allowed_types=PROFILE_REFERENCE_TYPES,
        default_type="Link",
    )
    if references:
        body["references"] = [reference.as_dict() for reference in references]

    errors = schema_errors(_VALIDATOR, body)
    if errors:
        LOGGER.info("drep_profile.rejected", errors=errors)
        raise ProfileDocumentError("DRep profile metadata is invalid", errors)

    return DRepProfileDocument.assemble(PROFILE_STANDARD, PROFILE_CONTEXT, body)


def _build_image(image: Any, image_hash: Any) -> Any:
    if isinstance(image, Mapping):
        url = image.get("contentUrl") or image.get("url")
        image_hash = image.get("sha256", image_hash)
    else:
        url = image
    if not has_content(url):
        return None
    payload: dict[str, Any] = {
        "@type": "ImageObject",
        "contentUrl": url.strip() if isinstance(url, str) else url,
    }
    if has_content(image_hash):
        payload["sha256"] = image_hash.strip() if isinstance(image_hash, str) else image_hash
    return payload