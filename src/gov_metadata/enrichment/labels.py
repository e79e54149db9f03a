"""Display labels for entities with or without a resolved profile."""

from __future__ import annotations

from gov_metadata.core.constants import FALLBACK_LABEL_LENGTH, SYSTEM_DREP_LABELS
from gov_metadata.core.models import Entity


def is_system_drep(entity_id: str) -> bool:
    return entity_id in SYSTEM_DREP_LABELS


def fallback_label(entity_id: str) -> str:
    """Identifier-derived label used when no profile name is known."""
    return SYSTEM_DREP_LABELS.get(entity_id) or entity_id[:FALLBACK_LABEL_LENGTH]


def display_label(entity: Entity) -> str:
    if is_system_drep(entity.entity_id):
        return SYSTEM_DREP_LABELS[entity.entity_id]
    if entity.profile is not None and entity.profile.display_name:
        return entity.profile.display_name
    if entity.given_name and entity.given_name.strip():
        return entity.given_name.strip()
    return fallback_label(entity.entity_id)
