"""Shared core utilities for the governance metadata engine."""

from .config import Settings, get_settings
from .exceptions import (
    DocumentValidationError,
    GovMetadataError,
    IndexerError,
    ProfileDocumentError,
    RationaleValidationError,
)
from .logging import configure_logging
from .models import (
    UNDEFINED,
    AnchorUpload,
    CanonicalProfile,
    Entity,
    EntityPage,
    JsonValue,
    PageQuery,
    ProfileReference,
)

__all__ = [
    "Settings",
    "UNDEFINED",
    "JsonValue",
    "CanonicalProfile",
    "ProfileReference",
    "Entity",
    "EntityPage",
    "PageQuery",
    "AnchorUpload",
    "GovMetadataError",
    "IndexerError",
    "DocumentValidationError",
    "RationaleValidationError",
    "ProfileDocumentError",
    "get_settings",
    "configure_logging",
]
