"""
proforma_backup.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs on stdout (or human-readable console output in dev).
- Stamp every event with the service identity and render enum values by name.
- Hand out component-scoped loggers and scoped context for multi-step operations.
"""

from __future__ import annotations

import enum
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def configure_logging(
    *, service_name: str, env: str, level: str, json_logs: bool = True
) -> None:
    """
    One event per line. JSON for ingestion; the console renderer is for local runs only.
    """

    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # SQL echo is far too chatty at INFO; engine problems surface as exceptions anyway.
    logging.getLogger("sqlalchemy.engine").setLevel(max(log_level, logging.WARNING))

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_static_fields(service=service_name, env=env),
            _enum_names,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_static_fields(**fields: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return processor


def _enum_names(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    # IntEnum members would otherwise serialize as bare numbers.
    for key, value in event_dict.items():
        if isinstance(value, enum.Enum):
            event_dict[key] = value.name
    return event_dict


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    # Stays a lazy proxy: safe at import time, before configure_logging() runs.
    return structlog.get_logger(name, **initial_values)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """
    Bind fields to every event emitted inside the block (including from other modules).
    Previous values are restored on exit; None values are not bound.
    """

    with structlog.contextvars.bound_contextvars(
        **{key: value for key, value in fields.items() if value is not None}
    ):
        yield


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata is bound via `log_context` in `observability.middleware`;
# backup-scoped metadata (snapshot sizes, phase) in `services.reconciliation`.
