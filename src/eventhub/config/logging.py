"""Logging configuration built on structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from eventhub.config.settings import Settings, get_settings


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name (``DEBUG``, ``INFO``, ...).
        fmt: ``console`` for human-readable output, ``json`` for one JSON
            object per line.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    renderer: structlog.typing.Processor
    if fmt.lower() == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def configure_logging_from_settings(settings: Settings | None = None) -> None:
    """Configure structlog from ``EVENTHUB_LOG_LEVEL`` / ``EVENTHUB_LOG_FORMAT``."""
    settings = settings or get_settings()
    configure_logging(
        settings.log_level, "json" if settings.is_json_logging else "console"
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger named after *name*."""
    return structlog.get_logger(name)
