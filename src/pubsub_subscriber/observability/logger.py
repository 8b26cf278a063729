"""structlog on top of stdlib logging, configured from `ObservabilitySettings`.

Everything goes through the root logger so uvicorn's own records and the
service's structlog events share one handler and one renderer.
"""
from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog
from structlog.stdlib import ProcessorFormatter

from pubsub_subscriber.config.redact import redact_settings_dict
from pubsub_subscriber.config.settings import ObservabilitySettings

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _scrub_event_dict(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    return redact_settings_dict(event_dict)


def output_format(observability: ObservabilitySettings) -> str:
    """`log_format` when set, otherwise the `json_logs` switch decides."""
    if observability.log_format:
        return observability.log_format
    return "json" if observability.json_logs else "human"


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _scrub_event_dict,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _renderer(fmt: str) -> Any:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(
    observability: ObservabilitySettings,
    *,
    stream: IO[str] | None = None,
) -> None:
    """
    Install a single root handler and point structlog at it.

    `stream` defaults to stdout; tests pass a buffer to read rendered lines.
    """
    processors = _shared_processors()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processor=_renderer(output_format(observability)),
            foreign_pre_chain=processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(observability.log_level.upper())

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True

    structlog.configure(
        processors=[*processors, ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
