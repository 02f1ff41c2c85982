"""Logging utilities configured for structured logging across the project."""

from __future__ import annotations

import logging
from typing import Optional, Union

import structlog

from .settings import LOG_FORMAT, LOG_LEVEL


def _resolve_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName((level or LOG_LEVEL).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str, None] = None,
    log_format: Optional[str] = None,
) -> None:
    """Configure structlog and standard logging for the service.

    Idempotent. ``level`` and ``log_format`` default to ``LOG_LEVEL`` and
    ``LOG_FORMAT``; ``console`` renders human-readable lines for local work,
    anything else emits one JSON object per event.
    """

    if getattr(setup_logging, "_configured", False):  # type: ignore[attr-defined]
        return

    renderer = (
        structlog.dev.ConsoleRenderer()
        if (log_format or LOG_FORMAT) == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=_resolve_level(level))

    setup_logging._configured = True  # type: ignore[attr-defined]
