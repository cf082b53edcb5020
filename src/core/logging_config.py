"""Structured logging configuration.

This module initializes a structlog logger with a stable JSON format.
Events go to stderr so command output on stdout stays machine-readable.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_CONFIGURED = False


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if not _CONFIGURED:
        configure_logging(DEFAULT_LOG_LEVEL)
    return structlog.get_logger(name)


def configure_logging(level_name: str) -> None:
    """Apply the structlog processor chain at the given level.

    Args:
        level_name: Standard logging level name, e.g. ``INFO``.
    """
    global _CONFIGURED
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level_name)),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
    _CONFIGURED = True


def _stderr_logger(*_args: Any) -> Any:
    """Create a print logger bound to the current stderr stream."""
    return structlog.PrintLogger(file=sys.stderr)


def _level_number(level_name: str) -> int:
    """Map a level name onto its stdlib numeric value."""
    return logging.getLevelName(level_name.upper())
