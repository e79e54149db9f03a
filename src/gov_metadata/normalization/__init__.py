"""Canonicalization of raw governance metadata."""

from .byte_strings import decode_byte_string
from .extractor import FIELD_RULES, FieldRule, extract_profile
from .references import normalize_references
from .sanitizer import sanitize, sanitize_mapping
from .shapes import RawMetadataShape, detect_shapes

__all__ = [
    "FIELD_RULES",
    "FieldRule",
    "RawMetadataShape",
    "decode_byte_string",
    "detect_shapes",
    "extract_profile",
    "normalize_references",
    "sanitize",
    "sanitize_mapping",
]
