"""Logging configuration for LyricSmith."""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

LOGGER_NAME = "lyricsmith"

_VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_BRIEF_FORMAT = "%(levelname)s: %(message)s"


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the package logger.

    Console output goes to ``stream`` (stdout by default); a file handler is
    added when ``log_file`` is given. Verbose mode switches to a formatter
    with timestamps and logger names.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_resolve_level(level))

    # Re-running setup (e.g. several CLI invocations in one process) must not
    # stack handlers
    logger.handlers.clear()

    formatter = logging.Formatter(_VERBOSE_FORMAT if verbose else _BRIEF_FORMAT)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
