"""Anchor documents published for on-chain governance actions."""

from .documents import (
    AnchorDocument,
    DRepProfileDocument,
    RationaleDocument,
    StorageSink,
    publish_anchor,
)
from .drep_profile import build_drep_profile
from .rationale import RationaleBuilder, RationaleStandard, build_rationale

__all__ = [
    "AnchorDocument",
    "DRepProfileDocument",
    "RationaleBuilder",
    "RationaleDocument",
    "RationaleStandard",
    "StorageSink",
    "build_drep_profile",
    "build_rationale",
    "publish_anchor",
]
