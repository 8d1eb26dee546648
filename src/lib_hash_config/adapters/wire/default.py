"""Wire-format adapter.

Purpose
-------
Implement the :class:`lib_hash_config.application.ports.WireCodec` protocol:
a compact, ASCII-inspectable encoding used to ship a whole store between
processes or over the network.

Format
------
::

    hcfg:<count> <logsize> <len>:<key> <len>:<value> <len>:<key> ...

* ``<count>`` is the number of entries, ``<logsize>`` the base-2 size of the
  sender's table; both are decimal.
* Every key and value is written as ``<len>:<text>`` followed by one space,
  where ``<len>`` is the decimal number of characters in ``<text>``. Text is
  copied verbatim, so ``=``, ``#``, whitespace and newlines all survive.

Contents
--------
* :class:`DefaultWireCodec` – protocol implementation.
* :func:`encode` / :func:`serialize` – writers.
* :func:`decode` / :func:`deserialize` – readers.
"""

from __future__ import annotations

import io
import re
from typing import Final

from ...application.ports import TextSink
from ...domain.config import ConfigStore
from ...domain.errors import WireFormatError
from ...observability import log_debug, log_error

WIRE_PREFIX: Final[str] = "hcfg:"
MAX_WIRE_LOGSIZE: Final[int] = 24

_HEADER: Final[re.Pattern[str]] = re.compile(r"\s*hcfg:(\d+)\s+(\d+)(?:\s|\Z)", re.ASCII)
_LENGTH: Final[re.Pattern[str]] = re.compile(r"\s*(\d+):", re.ASCII)


class DefaultWireCodec:
    """Stateless codec object satisfying :class:`WireCodec`."""

    def encode(self, store: ConfigStore, sink: TextSink) -> int:
        return encode(store, sink)

    def decode(self, store: ConfigStore, text: str) -> int:
        return decode(store, text)


def encode(store: ConfigStore, sink: TextSink) -> int:
    """Append the wire encoding of *store* to *sink*; return characters written.

    Raises
    ------
    TypeError
        When *store* is not a :class:`ConfigStore`.
    ValueError
        When the table is larger than :data:`MAX_WIRE_LOGSIZE` and therefore
        could not be decoded again. Nothing is written to *sink*.
    """

    if not isinstance(store, ConfigStore):
        raise TypeError(f"expected ConfigStore, got {type(store).__name__}")
    if store.logsize > MAX_WIRE_LOGSIZE:
        log_error("wire_error", reason="table too large to encode", logsize=store.logsize)
        raise ValueError(f"table size {store.logsize} exceeds wire limit {MAX_WIRE_LOGSIZE}")
    pieces = [f"{WIRE_PREFIX}{len(store)} {store.logsize} "]
    for key, value in store.entries():
        pieces.append(_encode_string(key))
        pieces.append(_encode_string(value))
    total = 0
    for piece in pieces:
        sink.write(piece)
        total += len(piece)
    log_debug("wire_encoded", entries=len(store), logsize=store.logsize, length=total)
    return total


def serialize(store: ConfigStore) -> str:
    """Return the wire encoding of *store*.

    Examples
    --------
    >>> store = ConfigStore(logsize=2)
    >>> store["k"] = "a b"
    >>> serialize(store)
    'hcfg:1 2 1:k 3:a b '
    """

    buffer = io.StringIO()
    encode(store, buffer)
    return buffer.getvalue()


def decode(store: ConfigStore, text: str) -> int:
    """Populate *store* from *text* and return the number of characters consumed.

    The store is resized once to the declared ``logsize`` before any insert.
    On :class:`WireFormatError` some entries may already be in *store*; the
    caller must discard it.
    """

    header = _HEADER.match(text)
    if header is None:
        raise _error("Malformed wire header", 0)
    count, logsize = int(header.group(1)), int(header.group(2))
    if not 1 <= logsize <= MAX_WIRE_LOGSIZE or count >= (1 << logsize):
        raise _error(f"Invalid table size {logsize} for {count} entries", header.start(2))

    store.reserve(logsize)
    offset = header.end()
    for _ in range(count):
        key, offset = _decode_string(text, offset)
        value, offset = _decode_string(text, offset)
        store.set(key, value)
    log_debug("wire_decoded", entries=count, logsize=logsize, consumed=offset)
    return offset


def deserialize(store: ConfigStore, text: str) -> int:
    """Alias of :func:`decode` matching the public operation name.

    Examples
    --------
    >>> store = ConfigStore()
    >>> deserialize(store, "hcfg:2 8 1:a 1:1 1:b 1:2 ")
    25
    >>> store["a"], store["b"]
    ('1', '2')
    """

    return decode(store, text)


def _encode_string(text: str) -> str:
    return f"{len(text)}:{text} "


def _decode_string(text: str, offset: int) -> tuple[str, int]:
    """Read one ``<len>:<text>`` field at *offset*; return it and the next offset."""

    match = _LENGTH.match(text, offset)
    if match is None:
        raise _error("Malformed string length", offset)
    start = match.end()
    end = start + int(match.group(1))
    if end > len(text):
        raise _error("String length exceeds remaining input", start)
    if end == len(text):
        return text[start:end], end
    if text[end] != " ":
        raise _error("String length does not match its content", end)
    return text[start:end], end + 1


def _error(message: str, offset: int) -> WireFormatError:
    log_error("wire_error", reason=message, offset=offset)
    return WireFormatError(message, offset)
