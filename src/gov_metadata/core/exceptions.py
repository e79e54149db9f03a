"""Custom exception hierarchy for the metadata engine."""

from __future__ import annotations


class GovMetadataError(Exception):
    """Base error for the governance metadata engine."""


class IndexerError(GovMetadataError):
    """Raised when the indexer cannot be reached or returns an unusable payload."""


class DocumentValidationError(GovMetadataError):
    """Raised when an anchor document cannot be assembled from its input fields."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)


class RationaleValidationError(DocumentValidationError):
    """Raised when a vote rationale is incomplete or exceeds its field limits."""


class ProfileDocumentError(DocumentValidationError):
    """Raised when DRep profile metadata is incomplete or exceeds its field limits."""
