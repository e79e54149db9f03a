"""Vote rationale documents for the CIP-108 and CIP-136 standards."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from jsonschema import Draft7Validator

from gov_metadata.core.constants import CIP100_URI, CIP108_URI, CIP136_URI, DOCUMENT_LANGUAGE
from gov_metadata.core.exceptions import RationaleValidationError
from gov_metadata.core.logging import get_logger
from gov_metadata.normalization.references import normalize_references

from .documents import RationaleDocument, has_content, schema_errors

LOGGER = get_logger(__name__)


class RationaleStandard(str, Enum):
    CIP108 = "CIP108"
    CIP136 = "CIP136"


@dataclass(frozen=True, slots=True)
class RationaleField:
    name: str
    required: bool
    max_length: int | None = None


RATIONALE_FIELDS: dict[RationaleStandard, tuple[RationaleField, ...]] = {
    RationaleStandard.CIP108: (
        RationaleField("title", True, 80),
        RationaleField("abstract", True, 2500),
        RationaleField("motivation", True),
        RationaleField("rationale", True),
    ),
    RationaleStandard.CIP136: (
        RationaleField("summary", True, 300),
        RationaleField("rationaleStatement", True, 5000),
        RationaleField("precedentDiscussion", False, 3000),
        RationaleField("counterargumentDiscussion", False, 3000),
        RationaleField("conclusion", False, 1000),
    ),
}

REFERENCE_TYPES: dict[RationaleStandard, tuple[str, ...]] = {
    RationaleStandard.CIP108: ("GovernanceMetadata", "Other"),
    RationaleStandard.CIP136: ("GovernanceMetadata", "Other", "RelevantArticles"),
}

_AUTHORS_CONTEXT: dict[str, Any] = {
    "@id": "CIP100:authors",
    "@container": "@set",
    "@context": {
        "name": "http://xmlns.com/foaf/0.1/name",
        "witness": {
            "@id": "CIP100:witness",
            "@context": {
                "witnessAlgorithm": "CIP100:witnessAlgorithm",
                "publicKey": "CIP100:publicKey",
                "signature": "CIP100:signature",
            },
        },
    },
}


def build_context(standard: RationaleStandard) -> dict[str, Any]:
    """Return the fixed JSON-LD ``@context`` block for ``standard``."""
    prefix = standard.value
    reference_context: dict[str, Any] = {
        "GovernanceMetadata": "CIP100:GovernanceMetadataReference",
        "Other": "CIP100:OtherReference",
        "label": "CIP100:reference-label",
        "uri": "CIP100:reference-uri",
    }
    if standard is RationaleStandard.CIP136:
        reference_context["RelevantArticles"] = "CIP136:RelevantArticles"
    else:
        reference_context["referenceHash"] = {
            "@id": "CIP108:referenceHash",
            "@context": {
                "hashDigest": "CIP108:hashDigest",
                "hashAlgorithm": "CIP100:hashAlgorithm",
            },
        }
    body_context: dict[str, Any] = {
        "references": {
            "@id": f"{'CIP100' if standard is RationaleStandard.CIP136 else 'CIP108'}:references",
            "@container": "@set",
            "@context": reference_context,
        }
    }
    for entry in RATIONALE_FIELDS[standard]:
        body_context[entry.name] = f"{prefix}:{entry.name}"
    return {
        "@language": DOCUMENT_LANGUAGE,
        "CIP100": CIP100_URI,
        prefix: CIP136_URI if standard is RationaleStandard.CIP136 else CIP108_URI,
        "hashAlgorithm": "CIP100:hashAlgorithm",
        "body": {"@id": f"{prefix}:body", "@context": body_context},
        "authors": _AUTHORS_CONTEXT,
    }


def build_body_schema(standard: RationaleStandard) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for entry in RATIONALE_FIELDS[standard]:
        node: dict[str, Any] = {"type": "string", "pattern": r"\S"}
        if entry.max_length is not None:
            node["maxLength"] = entry.max_length
        properties[entry.name] = node
        if entry.required:
            required.append(entry.name)
    properties["references"] = {
        "type": "array",
        "minItems": 1,
        "items": {
            "type": "object",
            "required": ["@type", "label", "uri"],
            "properties": {
                "@type": {"enum": list(REFERENCE_TYPES[standard])},
                "label": {"type": "string", "minLength": 1},
                "uri": {"type": "string", "minLength": 1},
            },
        },
    }
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


class RationaleBuilder:
    """Assembles vote rationale documents for one governance-metadata standard.

    Field limits are checked, not enforced: input is expected to be truncated
    by the form already, so an over-long value rejects the whole build.
    """

    def __init__(self, standard: RationaleStandard | str = RationaleStandard.CIP136) -> None:
        self._standard = RationaleStandard(standard)
        self._fields = RATIONALE_FIELDS[self._standard]
        self._foreign = {
            entry.name
            for other, entries in RATIONALE_FIELDS.items()
            if other is not self._standard
            for entry in entries
        }
        self._validator = Draft7Validator(build_body_schema(self._standard))

    @property
    def standard(self) -> RationaleStandard:
        return self._standard

    def build(self, fields: Mapping[str, Any]) -> RationaleDocument:
        """Return the rationale document for ``fields``, raising when it would be incomplete."""
        foreign = sorted(name for name in self._foreign if has_content(fields.get(name)))
        if foreign:
            raise RationaleValidationError(
                f"{self._standard.value} rationale cannot carry fields of another standard",
                [f"{name} is not part of {self._standard.value}" for name in foreign],
            )

        body: dict[str, Any] = {}
        for entry in self._fields:
            value = fields.get(entry.name)
            if entry.required:
                if value is not None:
                    body[entry.name] = value
            elif has_content(value):
                body[entry.name] = value

        references = normalize_references(
            fields.get("references"),
            allowed_types=REFERENCE_TYPES[self._standard],
        )
        if references:
            body["references"] = [reference.as_dict() for reference in references]

        errors = schema_errors(self._validator, body)
        if errors:
            LOGGER.info("rationale.rejected", standard=self._standard.value, errors=errors)
            raise RationaleValidationError(f"{self._standard.value} rationale is invalid", errors)

        return RationaleDocument.assemble(self._standard.value, build_context(self._standard), body)


def build_rationale(
    fields: Mapping[str, Any],
    standard: RationaleStandard | str = RationaleStandard.CIP136,
) -> RationaleDocument:
    return RationaleBuilder(standard).build(fields)