"""Logging setup shared by the CLI, the window and headless runs."""

from __future__ import annotations

import logging
import os
from typing import Iterable

POND_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s: %(message)s"
POND_LOG_DATEFMT = "%H:%M:%S"
LOG_LEVEL_ENV_VAR = "KOIPOND_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"

# Loggers outside the ``pond`` package that follow the pond's level
POND_LOGGERS = ("pond", "koipond", "rendering")


def resolve_level(level: str | None = None) -> str:
    """Explicit level, else ``KOIPOND_LOG_LEVEL``, else INFO."""
    raw_level = level if level is not None else os.getenv(LOG_LEVEL_ENV_VAR)
    return (raw_level or DEFAULT_LEVEL).upper()


def configure_logging(
    *,
    level: str | None = None,
    format: str = POND_LOG_FORMAT,
    datefmt: str = POND_LOG_DATEFMT,
    extra_loggers: Iterable[str] | None = None,
) -> logging.Logger:
    """Configure pond logging.

    Args:
        level: Optional explicit log level. Falls back to ``KOIPOND_LOG_LEVEL``
            env var or INFO when not provided.
        format: Log format string.
        datefmt: Date format string (time of day only; runs are short).
        extra_loggers: Logger names to align with the pond's level in
            addition to ``POND_LOGGERS``.

    Returns:
        The package logger (``pond``).
    """
    resolved_level = resolve_level(level)
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    for logger_name in (*POND_LOGGERS, *(extra_loggers or ())):
        logging.getLogger(logger_name).setLevel(resolved_level)

    pond_logger = logging.getLogger("pond")
    pond_logger.debug("Logging configured at %s", resolved_level)
    return pond_logger
