"""Unit tests for structured logging utilities in ``observability``."""

from __future__ import annotations

import logging

import pytest

from lib_hash_config import bind_trace_id, get_logger
from lib_hash_config.observability import TRACE_ID, log_info, log_warning, make_event


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="lib_hash_config")
    bind_trace_id("trace-123")
    try:
        log_info("config_loaded", operation="load", source=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "operation": "load", "source": None}


def test_warning_level(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_hash_config")
    log_warning("duplicate_key", line=3, key="seed")
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert getattr(record, "context")["line"] == 3


def test_bind_trace_id_clears_context() -> None:
    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    assert make_event("decode", None, {"entries": 3}) == {"operation": "decode", "source": None, "entries": 3}
    assert make_event("load", "a.cfg") == {"operation": "load", "source": "a.cfg"}
