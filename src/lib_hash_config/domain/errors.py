"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the hash engine, the text protocols,
and consuming applications. The hierarchy lives in the domain layer so adapters
may depend on it without the domain depending on them.

Contents
--------
* :class:`HashConfigError` – umbrella base class for all library failures.
* :class:`InvalidFormat` – malformed input in either text protocol.
* :class:`LineFormatError` – structural error in the ``key=value`` line format,
  qualified by line number and reason.
* :class:`WireFormatError` – corrupt header or string length in the wire
  format, qualified by the offset where decoding stopped.
* :class:`TableFullError` – the hash engine could not place an entry.

System Role
-----------
Key lookups that miss are *not* errors: :meth:`ConfigStore.get` returns
``None``. Only the mapping protocol (``store[key]``) raises :class:`KeyError`.
Callers catch :class:`HashConfigError` to handle every library failure
uniformly.
"""

from __future__ import annotations

from typing import Final

EMPTY_KEY: Final[str] = "Empty key string"
MISSING_SEPARATOR: Final[str] = "No key/value separator character (=)"


class HashConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_hash_config``."""


class InvalidFormat(HashConfigError):
    """Raised when an input artifact cannot be parsed into configuration entries.

    Why
    ----
    Distinguish malformed content from engine failures such as a full table.
    """


class LineFormatError(InvalidFormat):
    """A fatal structural error in the line-oriented text format.

    Attributes
    ----------
    line_number:
        1-based line number of the offending line.
    reason:
        Either :data:`EMPTY_KEY` or :data:`MISSING_SEPARATOR`.

    Examples
    --------
    >>> str(LineFormatError(3, EMPTY_KEY))
    'Config parse error: Line 3: Empty key string.'
    """

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(f"Config parse error: Line {line_number}: {reason}.")
        self.line_number = line_number
        self.reason = reason


class WireFormatError(InvalidFormat):
    """Corrupt wire header or string length mismatch.

    Attributes
    ----------
    offset:
        Character offset into the decoded text where parsing failed.
    """

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} (offset {offset})")
        self.offset = offset


class TableFullError(HashConfigError):
    """Raised when the open-addressing table has no empty slot left to probe."""
