"""Background metadata enrichment for pages of entities."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable

import anyio

from gov_metadata.core.config import Settings, get_settings
from gov_metadata.core.logging import get_logger
from gov_metadata.core.models import Entity

from .cache import ProfileCache

LOGGER = get_logger(__name__)

MetadataFetcher = Callable[[str], Awaitable[Any]]


class EnrichmentScheduler:
    """Fetches per-entity metadata for entities whose embedded data has no usable profile."""

    def __init__(
        self,
        cache: ProfileCache,
        settings: Settings | None = None,
        *,
        max_concurrency: int | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._cache = cache
        limit = max_concurrency if max_concurrency is not None else self._settings.enrichment_limit()
        self._limiter = anyio.CapacityLimiter(limit) if limit else None
        self._in_flight: set[str] = set()

    @property
    def cache(self) -> ProfileCache:
        return self._cache

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    def needs_metadata(self, entity: Entity) -> bool:
        if self._cache.has(entity.entity_id) or entity.entity_id in self._in_flight:
            return False
        profile = self._cache.extract(entity.metadata)
        if profile is None:
            return True
        return not profile.is_present or not profile.has_name_or_title

    def identify_missing(self, entities: Iterable[Entity]) -> list[str]:
        """Return ids to fetch, first-seen order, each at most once."""
        missing: list[str] = []
        seen: set[str] = set()
        for entity in entities:
            if entity.entity_id in seen:
                continue
            seen.add(entity.entity_id)
            if self.needs_metadata(entity):
                missing.append(entity.entity_id)
        return missing

    async def fetch_and_merge(self, ids: Iterable[str], fetch_one: MetadataFetcher) -> None:
        """Fetch metadata for ``ids`` concurrently and record the outcome in the cache."""
        claimed = self._claim(ids)
        if not claimed:
            return
        LOGGER.info("enrichment.batch_start", count=len(claimed))
        try:
            async with anyio.create_task_group() as task_group:
                for entity_id in claimed:
                    task_group.start_soon(self._fetch_one, entity_id, fetch_one)
        finally:
            self._in_flight.difference_update(claimed)
        resolved = sum(1 for entity_id in claimed if self._cache.get(entity_id) is not None)
        LOGGER.info("enrichment.batch_done", count=len(claimed), resolved=resolved)

    async def enrich(self, entities: Iterable[Entity], fetch_one: MetadataFetcher) -> list[Entity]:
        """Resolve a page of entities, fetching whatever their embedded metadata lacks."""
        entity_list = list(entities)
        self._cache.remember(entity_list)
        applied = self._cache.apply_all(entity_list)
        await self.fetch_and_merge(self.identify_missing(applied), fetch_one)
        return self._cache.apply_all(applied)

    def _claim(self, ids: Iterable[str]) -> list[str]:
        # Runs without awaiting so two callers never claim the same id.
        claimed: list[str] = []
        for entity_id in ids:
            if entity_id in self._in_flight or self._cache.has(entity_id):
                continue
            self._in_flight.add(entity_id)
            claimed.append(entity_id)
        return claimed

    async def _fetch_one(self, entity_id: str, fetch_one: MetadataFetcher) -> None:
        try:
            if self._limiter is not None:
                async with self._limiter:
                    payload = await fetch_one(entity_id)
            else:
                payload = await fetch_one(entity_id)
            profile = self._cache.extract(payload)
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.warning("enrichment.fetch_failed", entity_id=entity_id, error=str(exc))
            self._cache.set(entity_id, None, failed=True)
            return
        finally:
            self._in_flight.discard(entity_id)
        if profile is not None and profile.is_present:
            self._cache.set(entity_id, profile)
        else:
            self._cache.set(entity_id, None)
