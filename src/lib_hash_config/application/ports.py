"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that the stream plumbing and both text
protocols satisfy, so callers can hand in any file object, socket wrapper, or
in-memory buffer without the library caring where bytes come from.

Contents
--------
* :class:`TextSource` – anything with ``read(size)`` returning ``str``.
* :class:`TextSink` – anything with ``write(text)``.
* :class:`LineCodec` – reads and writes the ``key=value`` line format.
* :class:`WireCodec` – encodes and decodes the length-prefixed wire format.

System Role
-----------
The stream is always owned by the caller: adapters read from or write to it
and never close it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..domain.config import ConfigStore


@runtime_checkable
class TextSource(Protocol):
    """A readable text stream (file, ``io.StringIO``, socket makefile)."""

    def read(self, size: int = -1, /) -> str:
        """Return up to *size* characters; an empty string signals end of stream."""


@runtime_checkable
class TextSink(Protocol):
    """A writable text stream."""

    def write(self, text: str, /) -> int:
        """Append *text* and return the number of characters written."""


@runtime_checkable
class LineCodec(Protocol):
    """Parse and emit the line-oriented ``key=value`` format."""

    def load(self, store: ConfigStore, stream: TextSource) -> int:
        """Insert every entry found in *stream* and return how many lines produced one."""

    def write(self, store: ConfigStore, stream: TextSink) -> int:
        """Emit every live entry of *store* and return how many were written."""


@runtime_checkable
class WireCodec(Protocol):
    """Encode and decode the compact wire format."""

    def encode(self, store: ConfigStore, sink: TextSink) -> int:
        """Append the encoding of *store* to *sink* and return characters written."""

    def decode(self, store: ConfigStore, text: str) -> int:
        """Populate *store* from *text* and return characters consumed."""
