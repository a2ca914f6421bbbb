from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Labeled stdout logging for the formfill CLI.

Every line is ``LABEL message`` with LABEL one of INFO|WARN|ERROR|DEBUG|SUMMARY.
The handler lives on the "formfill" logger; modules log through
``logging.getLogger(__name__)`` and reach it as children. SUMMARY (25) sits
between INFO and WARNING so ``--debug`` never hides it and it is never
mistaken for a warning.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_level",
    "setup_logging",
]

LOGGER_NAME = "formfill"
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        line = f"{label} {record.getMessage()}"
        # logger.exception(...) keeps its traceback, indented under the line
        if record.exc_info:
            trace = self.formatException(record.exc_info)
            line += "\n" + "\n".join(f"  {t}" for t in trace.splitlines())
        return line


def setup_logging(level: int | str = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled handler to the "formfill" logger once.

    Later calls return the same logger untouched; use ``set_level`` to change
    verbosity afterwards. ``stream`` defaults to the current ``sys.stdout``.
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    set_level(level)
    return logger


def set_level(level: int | str) -> None:
    """Set the level of the application logger and all of its handlers."""
    logger = get_logger()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Emit ``SUMMARY message``."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup rebinds sys.stdout (tests)."""
    global _logger
    _logger = None
