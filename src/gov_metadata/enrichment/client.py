"""HTTP client for the governance indexer's list and metadata routes."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from gov_metadata.core.config import Settings, get_settings
from gov_metadata.core.exceptions import IndexerError
from gov_metadata.core.logging import get_logger
from gov_metadata.core.models import Entity, EntityKind, EntityPage, PageQuery

LOGGER = get_logger(__name__)

_ROUTES: dict[str, str] = {"drep": "dreps", "action": "actions"}
_LIST_KEYS: tuple[str, ...] = ("dreps", "actions", "items", "data", "results")
_ID_KEYS: dict[str, tuple[str, ...]] = {
    "drep": ("drep_id", "id"),
    "action": ("proposal_id", "action_id", "id"),
}


class IndexerClient(AbstractAsyncContextManager["IndexerClient"]):
    """Async wrapper around the paginated list and per-entity metadata endpoints."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        kind: EntityKind = "drep",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._kind = kind
        self._route = _ROUTES[kind]
        self._client = client or httpx.AsyncClient(
            base_url=str(self._settings.indexer_base_url),
            timeout=self._settings.indexer_timeout(),
            headers=self._settings.indexer_headers(),
        )

    # Context manager API -----------------------------------------------------
    async def __aenter__(self) -> "IndexerClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:  # type: ignore[override]
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # List operations ---------------------------------------------------------
    async def fetch_page(self, query: PageQuery) -> EntityPage:
        """Return one page of entities with whatever metadata the indexer embeds."""
        params = build_query_params(query)
        LOGGER.info("indexer.request", route=self._route, page=query.page, page_size=query.page_size)
        payload = await self._get_json(f"api/{self._route}", params=params)
        if payload is None:
            return EntityPage()
        return parse_page(payload, self._kind, query.page_size)

    # Metadata operations -----------------------------------------------------
    async def fetch_metadata(self, entity_id: str) -> Any:
        """Return the raw metadata payload for ``entity_id``, or ``None`` when there is none.

        DReps expose a dedicated metadata route. Actions do not, so their
        metadata is read from the embedded fields of the action record.
        """
        encoded = quote(entity_id, safe="")
        if self._kind == "drep":
            return await self._get_json(f"api/{self._route}/{encoded}/metadata", missing_ok=True)
        record = await self._get_json(f"api/{self._route}/{encoded}", missing_ok=True)
        return record_metadata(record)

    async def _get_json(
        self,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        missing_ok: bool = False,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise IndexerError(f"Indexer request to {path} failed") from exc
        if missing_ok and response.status_code == 404:
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise IndexerError(
                f"Indexer responded with status {response.status_code} for {path}"
            ) from exc
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise IndexerError(f"Indexer returned malformed JSON for {path}") from exc


def build_query_params(query: PageQuery) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = [
        ("page", str(query.page)),
        ("pageSize", str(query.page_size)),
    ]
    search = (query.search or "").strip()
    if search:
        params.append(("search", search))
    for status in query.statuses:
        params.append(("status[]", status))
    if query.sort:
        params.append(("sort", query.sort))
    if query.direction:
        params.append(("direction", query.direction))
    return params


def parse_page(payload: Any, kind: EntityKind, page_size: int) -> EntityPage:
    """Hydrate an :class:`EntityPage` from a list response body."""
    if isinstance(payload, list):
        records: Any = payload
        envelope: Mapping[str, Any] = {}
    elif isinstance(payload, Mapping):
        envelope = payload
        records = next((payload[key] for key in _LIST_KEYS if isinstance(payload.get(key), list)), [])
    else:
        raise IndexerError("Unexpected entity list payload")

    entities = [entity for entity in (hydrate_entity(item, kind) for item in records) if entity]
    return EntityPage(
        entities=entities,
        has_more=_extract_has_more(envelope, len(records), page_size),
        total=_extract_total(envelope),
    )


def hydrate_entity(item: Any, kind: EntityKind) -> Entity | None:
    if not isinstance(item, Mapping):
        return None
    entity_id = next(
        (str(item[key]).strip() for key in _ID_KEYS[kind] if item.get(key) not in (None, "")),
        "",
    )
    if not entity_id:
        return None
    metadata = record_metadata(item)
    given_name = item.get("given_name")
    has_profile = item.get("has_profile")
    return Entity(
        entity_id=entity_id,
        kind=kind,
        metadata=metadata,
        given_name=given_name if isinstance(given_name, str) else None,
        has_profile=has_profile if isinstance(has_profile, bool) else None,
        attributes=dict(item),
    )


def record_metadata(record: Any) -> Any:
    """Embedded metadata of an indexer record, from ``metadata`` or ``meta_json``."""
    if not isinstance(record, Mapping):
        return None
    metadata = record.get("metadata")
    if metadata is None:
        metadata = record.get("meta_json")
    return metadata


def _extract_has_more(payload: Mapping[str, Any], fallback_count: int, page_size: int) -> bool:
    for key in ("has_more", "hasMore"):
        value = payload.get(key)
        if isinstance(value, bool):
            return value
    return fallback_count >= page_size


def _extract_total(payload: Mapping[str, Any]) -> int | None:
    total = payload.get("total")
    if isinstance(total, bool):
        return None
    if isinstance(total, int):
        return total
    if isinstance(total, float) and total.is_integer():
        return int(total)
    if isinstance(total, str):
        try:
            return int(float(total.strip()))
        except (ValueError, OverflowError):
            return None
    return None
