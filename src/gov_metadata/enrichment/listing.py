"""Cancellable page loading for entity lists."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable

import anyio

from gov_metadata.core.config import Settings, get_settings
from gov_metadata.core.logging import get_logger, log_context
from gov_metadata.core.models import Entity, EntityPage, PageQuery

from .cache import ProfileCache
from .scheduler import EnrichmentScheduler, MetadataFetcher

LOGGER = get_logger(__name__)

PageFetcher = Callable[[PageQuery], Awaitable[EntityPage]]
RenderCallback = Callable[["ListingState"], None]


@dataclass(slots=True)
class ListingState:
    query: PageQuery
    entities: list[Entity] = field(default_factory=list)
    has_more: bool = False
    total: int | None = None
    loading: bool = False
    error: str | None = None


class ListingController:
    """Drives one paginated list: page, search and filter changes plus enrichment.

    Every ``load`` call supersedes the previous one. The superseded page fetch
    is cancelled and, should it still resolve, its result is dropped. Metadata
    enrichment is not cancelled: it only fills the shared cache, and its
    results are applied to whatever list is displayed once the batch settles.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        fetch_metadata: MetadataFetcher,
        settings: Settings | None = None,
        *,
        cache: ProfileCache | None = None,
        scheduler: EnrichmentScheduler | None = None,
        on_render: RenderCallback | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._fetch_page = fetch_page
        self._fetch_metadata = fetch_metadata
        if scheduler is not None:
            self._cache = scheduler.cache
            self._scheduler = scheduler
        else:
            self._cache = cache or ProfileCache(self._settings)
            self._scheduler = EnrichmentScheduler(self._cache, self._settings)
        self._on_render = on_render
        self._generation = 0
        self._scope: anyio.CancelScope | None = None
        self._state = ListingState(query=PageQuery(page_size=self._settings.page_size))

    @property
    def state(self) -> ListingState:
        return self._state

    @property
    def cache(self) -> ProfileCache:
        return self._cache

    def cancel(self) -> None:
        """Invalidate the in-flight load, if any."""
        self._generation += 1
        if self._scope is not None:
            self._scope.cancel()
            self._scope = None

    async def load(self, query: PageQuery) -> ListingState | None:
        """Fetch ``query``'s page, render it, then enrich it in the background.

        Returns the final state, or ``None`` when a newer load superseded this one
        before its page arrived.
        """
        with log_context(page=query.page, search=query.search, statuses=query.statuses):
            return await self._load(query)

    async def _load(self, query: PageQuery) -> ListingState | None:
        self.cancel()
        token = self._generation
        scope = anyio.CancelScope()
        self._scope = scope
        self._publish(replace(self._state, query=query, loading=True, error=None))

        page: EntityPage | None = None
        with scope:
            try:
                page = await self._fetch_page(query)
            except Exception as exc:  # pylint: disable=broad-except
                if token != self._generation:
                    return None
                LOGGER.warning("listing.page_failed", page=query.page, search=query.search, error=str(exc))
                self._scope = None
                self._publish(ListingState(query=query, error=str(exc)))
                return self._state

        if page is None or token != self._generation:
            LOGGER.debug("listing.stale_page_discarded", page=query.page, search=query.search)
            return None
        self._scope = None

        self._cache.remember(page.entities)
        self._publish(
            ListingState(
                query=query,
                entities=self._cache.apply_all(page.entities),
                has_more=page.has_more,
                total=page.total,
            )
        )

        missing = self._scheduler.identify_missing(self._state.entities)
        if missing:
            await self._scheduler.fetch_and_merge(missing, self._fetch_metadata)
            self._publish(replace(self._state, entities=self._cache.apply_all(self._state.entities)))
        return self._state

    def _publish(self, state: ListingState) -> None:
        self._state = state
        if self._on_render is not None:
            self._on_render(state)
