"""Logging configuration for the metadata engine.

Events are JSON lines carrying the dotted event name plus whatever context
is bound for the current task (entity kind, page, search) so that the
enrichment logs of concurrent listing loads can be told apart.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog._config import BoundLoggerLazyProxy

from .config import Settings, get_settings

TRANSPORT_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


def configure_logging(
    level: str | None = None,
    *,
    settings: Settings | None = None,
) -> None:
    """Configure standard logging and structlog."""
    resolved_settings = settings or get_settings()
    effective_level = level or resolved_settings.log_level
    numeric_level = getattr(logging, effective_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            level=numeric_level,
        )
    root_logger.setLevel(numeric_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            _add_indexer_host(str(resolved_settings.indexer_base_url)),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )
    _configure_transport_logging(numeric_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the emitting module."""
    # ``logger`` collides with wrap_logger's positional parameter, so build the
    # lazy proxy directly with the intended initial context.
    return BoundLoggerLazyProxy(None, initial_values={"logger": name}, logger_factory_args=(name,))


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Bind ``values`` to every event logged by the current task inside the block."""
    context = {key: value for key, value in values.items() if value not in (None, "", ())}
    with structlog.contextvars.bound_contextvars(**context):
        yield


def _add_indexer_host(host: str):
    def processor(_logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        # Only failures need the host; it is noise on routine events.
        if method_name in ("warning", "error", "exception", "critical"):
            event_dict.setdefault("indexer", host)
        return event_dict

    return processor


def _configure_transport_logging(level: int) -> None:
    """Keep httpx request logs one level quieter than the engine's own."""
    for logger_name in TRANSPORT_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(max(level, logging.WARNING))
        logger.propagate = True
