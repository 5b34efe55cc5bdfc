"""Logging utilities for nlpbench.

Every module obtains its logger through :func:`get_logger`, which keeps one
stderr handler per logger and never touches the root logger.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Default level, overridable through NLPBENCH_LOG_LEVEL
_DEFAULT_LEVEL = getattr(
    logging, os.getenv("NLPBENCH_LOG_LEVEL", "WARNING").upper(), logging.WARNING
)

# Module-level logger cache
_loggers: dict[str, logging.Logger] = {}


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a logger for the given module name.

    Loggers are cached to avoid duplicate handlers. The logger name should
    typically be `__name__` from the calling module.

    Args:
        name: Logger name (typically `__name__`). If None, returns the
            package logger.

    Returns:
        Configured logger instance.

    Example:
        >>> from nlpbench.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Evaluating objective")
    """
    if name is None:
        name = "nlpbench"

    logger_name = name if name.startswith("nlpbench") else f"nlpbench.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_FORMAT))

        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the logging level for all nlpbench loggers.

    Args:
        level: Logging level (logging.DEBUG, logging.INFO, etc.) or string
            ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').
    """
    level = _resolve_level(level)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Configure logging for nlpbench.

    Replaces the handler of every cached logger. It should typically be
    called once, before the first scenario runs.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. If None, uses default.
        stream: Output stream (default: sys.stderr).
    """
    level = _resolve_level(level)

    if stream is None:
        stream = sys.stderr

    formatter = logging.Formatter(format_string or _FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


__all__ = ["configure_logging", "get_logger", "set_log_level"]
