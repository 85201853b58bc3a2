"""Unit tests for log formatting and setup."""

import json
import logging
import sys

import pytest

from multisend.logging_config import KeyValueFormatter, StructuredFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "multisend.runtime.chunking.telemetry",
        logging.INFO,
        __file__,
        1,
        "chunk_completed",
        (),
        None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger("multisend")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_structured_formatter_emits_json_with_extras():
    """Test JSON lines include message, level and extra fields."""
    line = StructuredFormatter().format(_record(chunk_index=2, handle="0xabc"))
    payload = json.loads(line)

    assert payload["message"] == "chunk_completed"
    assert payload["level"] == "INFO"
    assert payload["chunk_index"] == 2
    assert payload["handle"] == "0xabc"


def test_structured_formatter_includes_exception():
    """Test exception details are serialized."""
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(StructuredFormatter().format(record))
    assert payload["exc_type"] == "ValueError"
    assert payload["exc_message"] == "boom"


def test_key_value_formatter_appends_extras():
    """Test text lines carry key=value pairs and drop None values."""
    line = KeyValueFormatter().format(_record(chunk_index=2, latency_ms=None))
    assert line.endswith("chunk_completed chunk_index=2")


def test_configure_logging_levels(restore_package_logger):
    """Test verbosity and handler replacement."""
    logger = configure_logging(verbose=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    logger = configure_logging(json_output=True)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
