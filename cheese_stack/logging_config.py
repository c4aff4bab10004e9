"""
Logging Configuration
=====================

Attaches handlers to the ``cheese_stack`` logger. Library modules only call
``logging.getLogger(__name__)``; tools and embedding applications call
``setup_logging`` once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "cheese_stack"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        return resolved
    return level


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the previous handlers, so the verbosity can be
    changed between runs without duplicated lines.

    Args:
        level: Logging level, as a number or a name such as "DEBUG".
        log_file: Optional path; the log is also written there (overwritten).

    Returns:
        The configured ``cheese_stack`` logger.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    level = _resolve_level(level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return logger
