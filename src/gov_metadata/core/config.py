"""Application configuration primitives."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRETS_PATH = Path(".secrets/secrets.toml")


def _authorization_header(api_key: str | None) -> dict[str, str]:
    if not api_key:
        return {}
    return {"Authorization": f"Bearer {api_key}"}


class Settings(BaseSettings):
    """Central configuration for the metadata engine."""

    indexer_base_url: HttpUrl = "http://localhost:8080"
    indexer_api_key: str | None = None
    request_timeout: float = 30.0

    page_size: int = 20
    enrichment_max_concurrency: int = 16
    bytes_fallback_max_depth: int = 2
    rationale_standard: Literal["CIP108", "CIP136"] = "CIP136"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(env_prefix="GOV_", env_file=(), extra="ignore")

    def indexer_headers(self) -> dict[str, str]:
        """Return the HTTP headers sent with every indexer request."""
        headers = {"Accept": "application/json"}
        headers.update(_authorization_header(_sanitize_api_key(self.indexer_api_key)))
        return headers

    def indexer_timeout(self) -> float | None:
        if self.request_timeout and self.request_timeout > 0:
            return float(self.request_timeout)
        return None

    def enrichment_limit(self) -> int | None:
        """Maximum parallel metadata fetches, ``None`` when unbounded."""
        if self.enrichment_max_concurrency <= 0:
            return None
        return self.enrichment_max_concurrency


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""
    overrides = _load_settings_overrides()
    return Settings(**overrides)


def _load_settings_overrides(secrets_path: Path = DEFAULT_SECRETS_PATH) -> dict[str, Any]:
    """Load configuration overrides from the secrets TOML file."""
    if not secrets_path.exists():
        return {}
    data = _read_toml(secrets_path)
    overrides: dict[str, Any] = {}

    indexer_cfg = _extract_section(data, "indexer", "backend")
    if indexer_cfg:
        overrides["indexer_base_url"] = indexer_cfg.get("url")
        api_key = _sanitize_api_key(indexer_cfg.get("api_key") or indexer_cfg.get("authorization"))
        if api_key is not None:
            overrides["indexer_api_key"] = api_key
        timeout_value = _coerce_float(indexer_cfg.get("timeout"))
        if timeout_value is not None:
            overrides["request_timeout"] = timeout_value

    general_cfg = data.get("gov") or {}
    overrides.update(
        {key: value for key, value in general_cfg.items() if key in Settings.model_fields}
    )
    return {key: value for key, value in overrides.items() if value is not None}


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _extract_section(data: dict[str, Any], *candidates: str) -> dict[str, Any] | None:
    for key in candidates:
        section = data.get(key)
        if isinstance(section, dict):
            return section
    return None


def _sanitize_api_key(value: str | None) -> str | None:
    if not value:
        return None
    token = value.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token or None


def _coerce_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None
