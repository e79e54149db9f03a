"""Discriminator for the wrapper layouts metadata arrives in."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


class RawMetadataShape(str, Enum):
    """Known places a metadata body can sit inside a raw payload.

    The ``*_BODY`` members are JSON-LD envelopes (CIP-100 style documents,
    possibly re-wrapped by an indexer); the remaining members are flat
    layouts where profile fields live directly on the object.
    """

    BODY = "body"
    JSON_METADATA_BODY = "json_metadata.body"
    EXTRA_BODY = "extra.body"
    EXTRA_JSON_METADATA_BODY = "extra.json_metadata.body"
    FLAT = "flat"
    EXTRA = "extra"
    JSON_METADATA = "json_metadata"
    BYTES = "bytes"

    @property
    def path(self) -> tuple[str, ...]:
        if self is RawMetadataShape.FLAT:
            return ()
        return tuple(self.value.split("."))


BODY_SHAPES: tuple[RawMetadataShape, ...] = (
    RawMetadataShape.BODY,
    RawMetadataShape.JSON_METADATA_BODY,
    RawMetadataShape.EXTRA_BODY,
    RawMetadataShape.EXTRA_JSON_METADATA_BODY,
)

FLAT_SHAPES: tuple[RawMetadataShape, ...] = (
    RawMetadataShape.FLAT,
    RawMetadataShape.EXTRA,
    RawMetadataShape.JSON_METADATA,
)


def locate(raw: Any, shape: RawMetadataShape) -> Mapping[str, Any] | None:
    """Return the mapping found at ``shape``'s path inside ``raw``, if any."""
    if shape is RawMetadataShape.BYTES:
        return None
    node: Any = raw
    for segment in shape.path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(segment)
    if isinstance(node, Mapping):
        return node
    return None


def encoded_bytes(raw: Any) -> str | None:
    if not isinstance(raw, Mapping):
        return None
    value = raw.get("bytes")
    if isinstance(value, str) and value.strip():
        return value
    return None


def detect_shapes(raw: Any) -> tuple[RawMetadataShape, ...]:
    """List every layout ``raw`` exposes, in extraction priority order."""
    if not isinstance(raw, Mapping):
        return ()
    shapes = [shape for shape in (*BODY_SHAPES, *FLAT_SHAPES) if locate(raw, shape) is not None]
    if encoded_bytes(raw) is not None:
        shapes.append(RawMetadataShape.BYTES)
    return tuple(shapes)


def body_locations(raw: Any) -> list[tuple[RawMetadataShape, Mapping[str, Any]]]:
    return _locations(raw, BODY_SHAPES)


def flat_locations(raw: Any) -> list[tuple[RawMetadataShape, Mapping[str, Any]]]:
    return _locations(raw, FLAT_SHAPES)


def _locations(
    raw: Any, shapes: tuple[RawMetadataShape, ...]
) -> list[tuple[RawMetadataShape, Mapping[str, Any]]]:
    found: list[tuple[RawMetadataShape, Mapping[str, Any]]] = []
    for shape in shapes:
        node = locate(raw, shape)
        if node is not None:
            found.append((shape, node))
    return found
