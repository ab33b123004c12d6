from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Output lines look like ``INFO ...``, ``WARN ...``, ``ERROR ...`` and
``SUMMARY ...``. SUMMARY is a custom level between INFO and WARNING so the
per-file and run totals are still printed when INFO is filtered out.

Engine modules log through ``logging.getLogger(__name__)``; everything below
the ``assessment_import`` logger ends up on the single stdout handler
installed here.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "set_debug",
    "reset_logging",
]

LOGGER_NAME = "assessment_import"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Prefix each message with its level label (INFO, WARN, ERROR, SUMMARY).

    Tracebacks attached to a record are appended below the message.
    """

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
        message = f"{level_label} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the application logger once (idempotent).

    Args:
        debug: Lower the logger and its handler to DEBUG

    Returns:
        The ``assessment_import`` logger with a labeled stdout handler.
    """
    global _logger

    if _logger is not None:
        if debug:
            set_debug(_logger)
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # no duplicate output through the root logger
    logger.propagate = False

    _logger = logger
    if debug:
        set_debug(logger)
    return logger


def set_debug(logger: logging.Logger) -> None:
    """Switch ``logger`` and all of its handlers to DEBUG."""
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG)
    logger.debug("debug mode enabled")


def get_logger() -> logging.Logger:
    """Get the configured application logger.

    Returns:
        The configured logger. Calls setup_logging() if not already configured.
    """
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level.

    Args:
        message: Line body without the ``SUMMARY`` label
    """
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Reset the global logger state. Mainly for tests."""
    global _logger
    if _logger is not None:
        for handler in _logger.handlers[:]:
            _logger.removeHandler(handler)
        _logger.setLevel(logging.NOTSET)
        _logger.propagate = True
    _logger = None
