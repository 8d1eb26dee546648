"""Structured logging helpers shared by the engine and both text protocols.

Purpose
    Describe *what* happened (resizes, parse warnings, decode failures) with
    stable event names and contextual fields, while leaving *where* the records
    go to the host application.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: emit
      structured entries via a single private emitter.
    - ``make_event``: convenience builder for structured event payloads.

System Integration
    The hash engine reports growth diagnostics, the line-format reader reports
    duplicate keys, oversized lines and parse errors, and the wire codec reports
    decode failures. Every record carries the same trace metadata.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_hash_config_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_hash_config")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('tuning-run-7')
    >>> TRACE_ID.get()
    'tuning-run-7'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_warning(message: str, **fields: Any) -> None:
    """Emit a structured warning for ignorable anomalies (duplicate keys, long lines)."""

    _emit(logging.WARNING, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    operation: str,
    source: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for store lifecycle events.

    Inputs
        operation: Name of the operation being observed (``"load"``, ``"decode"``).
        source: Path or stream name associated with the event, if known.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('load', 'tuning.cfg', {'entries': 3})
    {'operation': 'load', 'source': 'tuning.cfg', 'entries': 3}
    """

    event: dict[str, Any] = {"operation": operation, "source": source}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context
