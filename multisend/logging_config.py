"""Logging setup for drivers.

Library modules only create loggers; drivers call :func:`configure_logging`
once. Structured fields passed via ``extra=`` are rendered either as JSON
lines or appended to human-readable lines as ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "StructuredFormatter",
    "KeyValueFormatter",
    "configure_logging",
]

_LOGGER_NAME = "multisend"

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _STDLIB_KEYS}


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, val in _extras(record).items():
            payload.setdefault(key, val)
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class KeyValueFormatter(logging.Formatter):
    """Plain text lines with structured extras appended as key=value."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [f"{k}={v}" for k, v in _extras(record).items() if v is not None]
        if pairs:
            line += " " + " ".join(pairs)
        return line


def configure_logging(*, verbose: bool = False, json_output: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Args:
        verbose: Emit DEBUG records (per-entry decisions, probe steps)
        json_output: Use JSON lines instead of key=value text

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter() if json_output else KeyValueFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger
