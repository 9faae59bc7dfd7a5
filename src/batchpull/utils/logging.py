"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

# Libraries whose INFO output is per-packet noise during a batch
_QUIET_LOGGERS = ("paramiko", "paramiko.transport", "paramiko.transport.sftp")


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog and stdlib logging for a batch run.

    Scheduled runs set ``json_output`` so each event lands as one JSON line;
    interactive runs get the coloured console renderer.
    """
    renderer = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)
