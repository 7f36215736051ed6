from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Output lines look like ``INFO message`` / ``WARN message`` / ``SUMMARY ...``
on stdout. Library modules log through ``logging.getLogger(__name__)``; the
application logger below also receives those records because the package
logger ``trupath`` is wired to the same handler.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
    "SUMMARY_LEVEL",
    "LOGGER_NAME",
]

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

LOGGER_NAME = "trupath_scoring"
PACKAGE_LOGGER = "trupath"

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter that prefixes each message with its level label."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def _configure(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.setLevel(logging.INFO)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    logger.addHandler(handler)
    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False


def setup_logging() -> logging.Logger:
    """Setup the application logger (idempotent).

    Returns:
        Configured logger instance for the application
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())

    logger = logging.getLogger(LOGGER_NAME)
    _configure(logger, handler)
    _configure(logging.getLogger(PACKAGE_LOGGER), handler)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured application logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def set_debug() -> None:
    """Lower application and package loggers (and their handlers) to DEBUG."""
    for name in (LOGGER_NAME, PACKAGE_LOGGER):
        lg = logging.getLogger(name)
        lg.setLevel(logging.DEBUG)
        for h in lg.handlers:
            h.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level."""
    logger = get_logger()
    logger.log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Reset the global logger state. Mainly for testing purposes."""
    global _logger
    _logger = None
