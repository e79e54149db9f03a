"""Normalization of CIP-100 style reference lists."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from gov_metadata.core.models import ProfileReference


def _text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def normalize_references(
    entries: Any,
    *,
    allowed_types: Iterable[str] | None = None,
    default_type: str = "Other",
) -> list[ProfileReference]:
    """Return well-formed references, dropping entries without a label or uri.

    The reference type is read from ``@type`` (or a plain ``type`` key, as form
    input uses); types outside ``allowed_types`` collapse to ``default_type``.
    """
    if not isinstance(entries, (list, tuple)):
        return []
    allowed = set(allowed_types) if allowed_types is not None else None
    references: list[ProfileReference] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        label = _text(entry.get("label"))
        uri = _text(entry.get("uri"))
        if not label or not uri:
            continue
        ref_type = _text(entry.get("@type")) or _text(entry.get("type")) or default_type
        if allowed is not None and ref_type not in allowed:
            ref_type = default_type
        references.append(ProfileReference(type=ref_type, label=label, uri=uri))
    return references
