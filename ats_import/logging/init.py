from __future__ import annotations

import logging
import sys
from typing import Any

from ..models.batch import ImportBatch
from ..models.session import ImportSession
from ..services.summary import render_summary_line

"""Import log setup.

One stdout line per event, ``<LABEL> [<sheet>] <message>``:

    INFO people.xlsx: 3 sheets available for mapping
    WARN [Notes] sheet 'Notes' has no data rows
    SUMMARY file=people.xlsx status=committed sheets=2/3 ...

The ``[<sheet>]`` tag appears for records logged through ``sheet_logger``.
Pipeline modules log with ``logging.getLogger(__name__)`` and inherit the
handler of the ``ats_import`` logger configured here.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "sheet_logger",
    "log_summary",
    "log_session_summary",
    "reset_logging",
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
]

APP_LOGGER_NAME = "ats_import"
SUMMARY_LEVEL = 25  # between INFO and WARNING
SUMMARY_PREFIX = "SUMMARY "

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``<LABEL> [<sheet>] <message>``; the sheet tag only when the record has one."""

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
        sheet = getattr(record, "sheet", None)
        if sheet:
            return f"{label} [{sheet}] {record.getMessage()}"
        return f"{label} {record.getMessage()}"


class _SheetAdapter(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs.setdefault("extra", {}).update(self.extra)
        return msg, kwargs


def sheet_logger(logger: logging.Logger, sheet: str) -> logging.LoggerAdapter:
    """Wrap ``logger`` so every record carries the workbook sheet name."""
    return _SheetAdapter(logger, {"sheet": sheet})


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the ``ats_import`` logger once; later calls only change the level."""
    global _logger

    level = logging.DEBUG if debug else logging.INFO
    if _logger is not None:
        _logger.setLevel(level)
        for h in _logger.handlers:
            h.setLevel(level)
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log ``message`` at SUMMARY level (the label is added by the formatter)."""
    if message.startswith(SUMMARY_PREFIX):
        message = message[len(SUMMARY_PREFIX):]
    get_logger().log(SUMMARY_LEVEL, message)


def log_session_summary(session: ImportSession, batch: ImportBatch | None = None) -> str:
    """Log the SUMMARY line of an import session and return it."""
    line = render_summary_line(session, batch)
    log_summary(line)
    return line


def reset_logging() -> None:
    """Drop the configured handler (tests)."""
    global _logger
    if _logger is not None:
        for handler in _logger.handlers[:]:
            _logger.removeHandler(handler)
    _logger = None
