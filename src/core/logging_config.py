"""Structured logging configuration.

This module initializes a structlog logger with a stable JSON format.
Rendered events are routed through stdlib logging so that host
applications and the CLI control handlers and levels.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def configure_log_level(level_name: str) -> None:
    """Attach a stderr handler to the root logger at the given level.

    Args:
        level_name: Standard level name such as ``INFO`` or ``WARNING``.
    """
    logging.basicConfig(level=level_name.upper(), format="%(message)s")
