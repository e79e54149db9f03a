"""Session-scoped memo of canonical profiles keyed by entity id."""

from __future__ import annotations

from dataclasses import replace
from functools import partial
from typing import Any, Callable, Iterable

from gov_metadata.core.config import Settings, get_settings
from gov_metadata.core.logging import get_logger
from gov_metadata.core.models import UNDEFINED, CanonicalProfile, Entity, Undefined
from gov_metadata.normalization.extractor import extract_profile

LOGGER = get_logger(__name__)

ProfileExtractor = Callable[[Any], "CanonicalProfile | None"]
CachedProfile = CanonicalProfile | None | Undefined


class ProfileCache:
    """Three-state profile store: unset, checked-empty (``None``) or a profile.

    One instance lives for one browsing session; entries are never evicted.
    Only ``get``, ``has`` and ``set`` touch the underlying store, and none of
    them awaits, so a check followed by a set within one synchronous turn is
    atomic with respect to other tasks on the event loop.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        extractor: ProfileExtractor | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._extract = extractor or partial(
            extract_profile, bytes_depth=self._settings.bytes_fallback_max_depth
        )
        self._entries: dict[str, CanonicalProfile | None] = {}
        self._failed: set[str] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entries

    def get(self, entity_id: str) -> CachedProfile:
        return self._entries.get(entity_id, UNDEFINED)

    def has(self, entity_id: str) -> bool:
        return entity_id in self._entries

    def set(self, entity_id: str, profile: CanonicalProfile | None, *, failed: bool = False) -> None:
        """Store ``profile`` for ``entity_id``; ``failed`` marks a transport failure."""
        self._entries[entity_id] = profile
        if failed:
            self._failed.add(entity_id)
        else:
            self._failed.discard(entity_id)

    def failed(self, entity_id: str) -> bool:
        """True when the stored ``None`` came from a failed fetch rather than empty metadata."""
        return entity_id in self._failed

    def extract(self, raw: Any) -> CanonicalProfile | None:
        return self._extract(raw)

    def remember(self, entities: Iterable[Entity]) -> int:
        """Cache present profiles found in embedded metadata; return how many were stored."""
        stored = 0
        for entity in entities:
            if self.has(entity.entity_id) or entity.metadata is None:
                continue
            profile = self.extract(entity.metadata)
            if profile is not None and profile.is_present:
                self.set(entity.entity_id, profile)
                stored += 1
        if stored:
            LOGGER.debug("profile_cache.remembered", stored=stored, size=len(self))
        return stored

    def apply_from_cache(self, entity_id: str, fallback_raw: Any) -> CachedProfile:
        """Resolve the profile to display for ``entity_id``.

        Returns ``None`` when the id was checked and has no usable profile,
        the cached profile layered over whatever ``fallback_raw`` yields when
        cached, and otherwise the profile extracted from ``fallback_raw``
        (``UNDEFINED`` when that yields nothing). The fallback result is not
        written back.
        """
        cached = self.get(entity_id)
        if cached is None:
            return None
        fresh = self.extract(fallback_raw)
        if cached is UNDEFINED:
            return fresh if fresh is not None else UNDEFINED
        return cached.merged_over(fresh)

    def apply(self, entity: Entity) -> Entity:
        """Return a copy of ``entity`` with its display fields resolved through the cache.

        A ``has_profile`` flag reported by the indexer is kept unless the id was
        checked and found empty.
        """
        resolved = self.apply_from_cache(entity.entity_id, entity.metadata)
        if resolved is None:
            return replace(entity, metadata=None, profile=None, has_profile=False)
        if resolved is UNDEFINED:
            return replace(entity, profile=None, has_profile=bool(entity.has_profile))
        given_name = entity.given_name if entity.given_name and entity.given_name.strip() else None
        return replace(
            entity,
            metadata=resolved.as_dict(),
            profile=resolved,
            has_profile=bool(entity.has_profile) or resolved.is_present,
            given_name=given_name or resolved.display_name,
        )

    def apply_all(self, entities: Iterable[Entity]) -> list[Entity]:
        return [self.apply(entity) for entity in entities]
