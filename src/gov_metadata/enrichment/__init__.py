"""Profile caching and background metadata enrichment."""

from .cache import ProfileCache
from .client import IndexerClient
from .labels import display_label, fallback_label
from .listing import ListingController, ListingState
from .scheduler import EnrichmentScheduler

__all__ = [
    "EnrichmentScheduler",
    "IndexerClient",
    "ListingController",
    "ListingState",
    "ProfileCache",
    "display_label",
    "fallback_label",
]
