"""Shared constant values used across the governance metadata engine."""

from __future__ import annotations

from typing import Final

CIP100_URI: Final[str] = "https://github.com/cardano-foundation/CIPs/blob/master/CIP-0100/README.md#"
CIP108_URI: Final[str] = "https://github.com/cardano-foundation/CIPs/blob/master/CIP-0108/README.md#"
CIP119_URI: Final[str] = "https://github.com/cardano-foundation/CIPs/blob/master/CIP-0119/README.md#"
CIP136_URI: Final[str] = "https://github.com/cardano-foundation/CIPs/blob/master/CIP-0136/README.md#"

HASH_ALGORITHM: Final[str] = "blake2b-256"
DOCUMENT_LANGUAGE: Final[str] = "en-us"

SYSTEM_DREP_LABELS: Final[dict[str, str]] = {
    "drep_always_abstain": "Always Abstain",
    "drep_always_no_confidence": "Always No Confidence",
    "drep_always_yes": "Always Yes",
    "drep_always_no": "Always No",
}

FALLBACK_LABEL_LENGTH: Final[int] = 8
