from __future__ import annotations

import logging

import structlog

from gov_metadata.core.config import Settings
from gov_metadata.core.logging import _add_indexer_host, configure_logging, log_context


def test_log_context_binds_only_inside_block() -> None:
    structlog.contextvars.clear_contextvars()

    with log_context(page=2, search="alice", statuses=()):
        assert structlog.contextvars.get_contextvars() == {"page": 2, "search": "alice"}

    assert structlog.contextvars.get_contextvars() == {}


def test_indexer_host_is_added_to_failures_only() -> None:
    processor = _add_indexer_host("http://indexer.test/")

    assert processor(None, "warning", {"event": "enrichment.fetch_failed"})["indexer"] == "http://indexer.test/"
    assert "indexer" not in processor(None, "info", {"event": "indexer.request"})


def test_configure_logging_quiets_transport_loggers() -> None:
    configure_logging("DEBUG", settings=Settings())

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
