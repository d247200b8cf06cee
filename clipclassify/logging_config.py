# Path: clipclassify/logging_config.py
# Purpose: Configure package logging for the CLI and API entrypoints.
# Layer: root.
# Details: Human-readable lines by default, JSON lines on request; logs go to stderr so stdout carries results.

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Union

PACKAGE_LOGGER = "clipclassify"


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(level: Union[int, str] = logging.INFO, structured: bool = False) -> logging.Logger:
    """
    Configure the ``clipclassify`` package logger.

    Safe to call more than once: the level is always updated, but only one
    handler is ever attached.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        if structured:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        package_logger.addHandler(handler)

    return package_logger
