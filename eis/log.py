"""The engine's core and client loggers."""

from __future__ import annotations

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

CORE_LOGGER_NAME = "EIS"
CLIENT_LOGGER_NAME = "APP"

_handlers: list[logging.Handler] = []


class _LowerLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = original.lower()
        try:
            return super().format(record)
        finally:
            record.levelname = original


def core_logger() -> logging.Logger:
    return logging.getLogger(CORE_LOGGER_NAME)


def client_logger() -> logging.Logger:
    return logging.getLogger(CLIENT_LOGGER_NAME)


def init(log_file: str = "Eis.log") -> None:
    """Send both loggers to stdout and to ``log_file``, which is truncated."""
    loggers = (core_logger(), client_logger())
    for handler in _handlers:
        for logger in loggers:
            logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter("[%(asctime)s] %(name)s: %(message)s", "%H:%M:%S"))
    file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    file_handler.setFormatter(
        _LowerLevelFormatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s", "%H:%M:%S")
    )
    _handlers.extend([console, file_handler])

    for logger in loggers:
        logger.setLevel(TRACE)
        logger.propagate = False
        for handler in _handlers:
            handler.setLevel(TRACE)
            logger.addHandler(handler)