"""Structured logging configuration.

This module initializes a logger with a stable structured format.
It prefers structlog and falls back to standard logging if absent.
The minimum level comes from BUGDASH_LOG_LEVEL. Events go to stderr so
command output on stdout stays line-parseable.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from core.constants import DEFAULT_LOG_LEVEL


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog or stdlib logger with structured output.
    """
    level = _resolve_log_level()
    try:
        import structlog
    except ImportError:
        return _get_standard_logger(name, level)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def _resolve_log_level() -> int:
    """Map BUGDASH_LOG_LEVEL onto a stdlib level number.

    Unknown names fall back to the default level.
    """
    level_name = os.getenv("BUGDASH_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    if isinstance(level, int):
        return level
    return int(logging.getLevelName(DEFAULT_LOG_LEVEL))


def _get_standard_logger(name: str, level: int) -> Any:
    """Create a stdlib logger fallback.

    Args:
        name: Logger name.
        level: Minimum enabled level.

    Returns:
        Configured standard logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(level)
    return _StructuredStandardLogger(logger)


class _StructuredStandardLogger:
    """Stdlib logger adapter that accepts structured keyword fields."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def debug(self, event: str, **fields: object) -> None:
        self._logger.debug(_format_event(event, fields))

    def info(self, event: str, **fields: object) -> None:
        self._logger.info(_format_event(event, fields))

    def warning(self, event: str, **fields: object) -> None:
        self._logger.warning(_format_event(event, fields))

    def error(self, event: str, **fields: object) -> None:
        self._logger.error(_format_event(event, fields))


def _format_event(event: str, fields: dict[str, object]) -> str:
    """Render a structured event line for standard logging."""
    if not fields:
        return event
    payload = {"event": event, **fields}
    return json.dumps(payload, sort_keys=True, default=str)
