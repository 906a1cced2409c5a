"""Logging configuration for the resume screener.

Diagnostics go to stderr under the ``resume_screener`` logger so that the
CLI can keep stdout for scores and reports.
"""

import logging
import sys
from typing import TextIO

# Logger name for the application
LOGGER_NAME = "resume_screener"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Modules pass either "screening.service" or their dotted "src.screening.service"
_PACKAGE_PREFIX = "src."

_handler: logging.Handler | None = None


def resolve_level(level: str | int | None) -> int:
    """Turn a level name or number into a logging level, defaulting to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName((level or "INFO").strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: str | int | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the application logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL) or number.
               Unknown names fall back to INFO.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.
        stream: Where to write records. Defaults to stderr.

    Returns:
        The configured application logger.

    Calling this again only adjusts the level; the handler installed by the
    first call is kept.
    """
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    log_level = resolve_level(level)
    logger.setLevel(log_level)

    if _handler is None:
        logger.handlers.clear()
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(format_string, datefmt=date_format))
        logger.addHandler(_handler)
        logger.propagate = False

    _handler.setLevel(log_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger named ``resume_screener.<name>``.

    A leading ``src.`` is dropped, so ``get_logger(__name__)`` and
    ``get_logger("screening.service")`` return the same logger.
    """
    if name.startswith(_PACKAGE_PREFIX):
        name = name[len(_PACKAGE_PREFIX) :]
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

    _handler = None
