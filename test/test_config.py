from __future__ import annotations

from pathlib import Path

from gov_metadata.core.config import Settings, _load_settings_overrides


def test_headers_normalise_bearer_prefix() -> None:
    settings = Settings(indexer_api_key="  Bearer abc123 ")

    assert settings.indexer_headers() == {
        "Accept": "application/json",
        "Authorization": "Bearer abc123",
    }
    assert Settings().indexer_headers() == {"Accept": "application/json"}


def test_environment_prefix(monkeypatch) -> None:
    monkeypatch.setenv("GOV_PAGE_SIZE", "50")
    monkeypatch.setenv("GOV_ENRICHMENT_MAX_CONCURRENCY", "0")
    monkeypatch.setenv("GOV_RATIONALE_STANDARD", "CIP108")

    settings = Settings()

    assert settings.page_size == 50
    assert settings.enrichment_limit() is None
    assert settings.rationale_standard == "CIP108"


def test_timeout_disabled_when_not_positive() -> None:
    assert Settings(request_timeout=0).indexer_timeout() is None
    assert Settings(request_timeout=5).indexer_timeout() == 5.0


def test_secrets_file_overrides(tmp_path: Path) -> None:
    secrets = tmp_path / "secrets.toml"
    secrets.write_text(
        "\n".join(
            [
                "[indexer]",
                'url = "https://indexer.example"',
                'authorization = "Bearer from-file"',
                'timeout = "12.5"',
                "",
                "[gov]",
                "page_size = 30",
                'unknown = "ignored"',
            ]
        ),
        encoding="utf-8",
    )

    overrides = _load_settings_overrides(secrets)

    assert overrides == {
        "indexer_base_url": "https://indexer.example",
        "indexer_api_key": "from-file",
        "request_timeout": 12.5,
        "page_size": 30,
    }
    assert _load_settings_overrides(tmp_path / "missing.toml") == {}
