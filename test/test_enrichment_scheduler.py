from __future__ import annotations

from collections import Counter
from typing import Any

import anyio
import pytest

from gov_metadata.core.config import Settings
from gov_metadata.core.models import Entity
from gov_metadata.enrichment import EnrichmentScheduler, ProfileCache


class FakeMetadataSource:
    def __init__(self, payloads: dict[str, Any] | None = None, *, failing: set[str] | None = None) -> None:
        self._payloads = payloads or {}
        self._failing = failing or set()
        self.calls: list[str] = []
        self.active = 0
        self.peak = 0
        self.release = anyio.Event()
        self.release.set()

    async def __call__(self, entity_id: str) -> Any:
        self.calls.append(entity_id)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await self.release.wait()
            await anyio.sleep(0)
            if entity_id in self._failing:
                raise RuntimeError(f"metadata endpoint unavailable for {entity_id}")
            return self._payloads.get(entity_id)
        finally:
            self.active -= 1


def _scheduler(**kwargs: Any) -> EnrichmentScheduler:
    settings = Settings()
    return EnrichmentScheduler(ProfileCache(settings), settings, **kwargs)


def test_identify_missing_skips_cached_and_duplicate_ids() -> None:
    scheduler = _scheduler()
    scheduler.cache.set("drep2", None)
    entities = [
        Entity("drep1"),
        Entity("drep2"),
        Entity("drep3", metadata={"body": {"givenName": "Has profile"}}),
        Entity("drep4", metadata={"email": "only@example.com"}),
        Entity("drep1"),
    ]

    assert scheduler.identify_missing(entities) == ["drep1", "drep4"]


@pytest.mark.anyio
async def test_page_of_twenty_fetches_only_missing_profiles() -> None:
    embedded = [Entity(f"drep{i:02d}", metadata={"body": {"givenName": f"DRep {i}"}}) for i in range(5)]
    missing = [Entity(f"drep{i:02d}") for i in range(5, 20)]
    payloads = {f"drep{i:02d}": {"body": {"givenName": f"Fetched {i}"}} for i in range(5, 8)}
    source = FakeMetadataSource(payloads)
    scheduler = _scheduler()

    enriched = await scheduler.enrich(embedded + missing, source)

    assert sorted(source.calls) == [f"drep{i:02d}" for i in range(5, 20)]
    assert all(isinstance(entity.has_profile, bool) for entity in enriched)
    assert sum(1 for entity in enriched if entity.has_profile) == 8
    assert [entity.given_name for entity in enriched[5:8]] == ["Fetched 5", "Fetched 6", "Fetched 7"]
    assert all(scheduler.cache.get(entity.entity_id) is None for entity in enriched[8:])
    assert not scheduler.in_flight


@pytest.mark.anyio
async def test_overlapping_batches_never_fetch_an_id_twice() -> None:
    source = FakeMetadataSource({"a": {"name": "A"}})
    source.release = anyio.Event()
    scheduler = _scheduler()

    async with anyio.create_task_group() as task_group:
        task_group.start_soon(scheduler.fetch_and_merge, ["a", "b", "c"], source)
        task_group.start_soon(scheduler.fetch_and_merge, ["b", "c", "d", "a"], source)
        await anyio.sleep(0.01)
        assert scheduler.in_flight == {"a", "b", "c", "d"}
        source.release.set()

    assert Counter(source.calls) == {"a": 1, "b": 1, "c": 1, "d": 1}
    assert scheduler.cache.get("a").name == "A"


@pytest.mark.anyio
async def test_failed_fetch_is_cached_as_empty() -> None:
    source = FakeMetadataSource({"ok": {"title": "Fine"}}, failing={"broken"})
    scheduler = _scheduler()

    await scheduler.fetch_and_merge(["ok", "broken"], source)

    assert scheduler.cache.get("broken") is None
    assert scheduler.cache.failed("broken")
    assert scheduler.cache.get("ok").title == "Fine"
    assert not scheduler.in_flight

    await scheduler.fetch_and_merge(["broken"], source)
    assert source.calls.count("broken") == 1


@pytest.mark.anyio
async def test_concurrency_limit_is_respected() -> None:
    source = FakeMetadataSource()
    scheduler = _scheduler(max_concurrency=2)

    await scheduler.fetch_and_merge([f"drep{i}" for i in range(6)], source)

    assert len(source.calls) == 6
    assert source.peak <= 2
