"""Line-format adapter.

Purpose
-------
Implement the :class:`lib_hash_config.application.ports.LineCodec` protocol for
the human-edited ``key=value`` configuration format.

Grammar (one entry per line)::

    # comment lines and blank lines are skipped
    Key = value with spaces   # trailing comment

* Leading and trailing ASCII whitespace is trimmed; ``#`` starts a comment.
  Other Unicode spaces (NBSP, ideographic space) are ordinary characters.
* The key ends at the first whitespace or ``=`` and is lowercased.
* Whitespace may separate the key from ``=``; leading value whitespace is
  dropped.
* There is no quoting or escaping. Values containing ``#`` or surrounding
  whitespace do not survive a write/load cycle.

Contents
--------
* :class:`DefaultLineCodec` – entry point bound to a chunk size.
* :func:`iter_lines` – bounded-buffer line scanner over a text stream.
* :func:`parse_line` – single-line parser raising :class:`LineFormatError`.
* :func:`load` / :func:`load_path` / :func:`loads` – readers.
* :func:`write` / :func:`dumps` – writers.

System Role
-----------
Feeds files written by operators into a :class:`ConfigStore` and renders a
store back for inspection. Streams are never closed here.
"""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import Final, Iterator

from ...application.ports import TextSink, TextSource
from ...domain.config import ConfigStore
from ...domain.errors import EMPTY_KEY, MISSING_SEPARATOR, LineFormatError
from ...observability import log_debug, log_error, log_warning, make_event

CHUNK_SIZE: Final[int] = 4096
_WHITESPACE: Final[str] = " \t\n\r\f\v"
_KEY_END: Final[re.Pattern[str]] = re.compile(r"[=\s]", re.ASCII)


class DefaultLineCodec:
    """Read and write the line format with a fixed line buffer.

    Examples
    --------
    >>> import io
    >>> codec = DefaultLineCodec()
    >>> store = ConfigStore()
    >>> codec.load(store, io.StringIO("Alpha = 1\\n# note\\n\\nBeta=2\\n"))
    2
    >>> store.as_dict() == {"alpha": "1", "beta": "2"}
    True
    """

    def __init__(self, *, chunk_size: int = CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def load(self, store: ConfigStore, stream: TextSource) -> int:
        return load(store, stream, chunk_size=self.chunk_size)

    def write(self, store: ConfigStore, stream: TextSink) -> int:
        return write(store, stream)


def iter_lines(
    stream: TextSource,
    *,
    chunk_size: int = CHUNK_SIZE,
    source: str | None = None,
) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, text)`` for every line of *stream*.

    Reads at most *chunk_size* characters of pending data at a time and
    reassembles lines that straddle chunk boundaries. A final line without a
    terminator is still produced. A line longer than the buffer is reported,
    skipped up to its terminator, and still counted.

    Examples
    --------
    >>> import io
    >>> list(iter_lines(io.StringIO("a=1\\nb=2")))
    [(1, 'a=1'), (2, 'b=2')]
    >>> list(iter_lines(io.StringIO("toolong\\nc=3\\n"), chunk_size=4))
    [(2, 'c=3')]
    """

    buffer = ""
    line_number = 0
    at_eof = False
    while True:
        newline = buffer.find("\n")
        if newline >= 0:
            line_number += 1
            yield line_number, buffer[:newline]
            buffer = buffer[newline + 1 :]
            continue
        if at_eof:
            if buffer:
                line_number += 1
                yield line_number, buffer
            return
        if len(buffer) >= chunk_size:
            line_number += 1
            log_warning("line_overflow", source=source, line=line_number, limit=chunk_size)
            buffer = _skip_line(stream, chunk_size)
            continue
        chunk = stream.read(chunk_size - len(buffer))
        if not chunk:
            at_eof = True
        buffer += chunk


def _skip_line(stream: TextSource, chunk_size: int) -> str:
    """Discard input up to the next newline and return what follows it."""

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return ""
        newline = chunk.find("\n")
        if newline >= 0:
            return chunk[newline + 1 :]


def parse_line(text: str, line_number: int = 0) -> tuple[str, str] | None:
    """Parse one line into ``(key, value)``; ``None`` for blank or comment lines.

    Raises
    ------
    LineFormatError
        When the key is empty or no ``=`` follows it.

    Examples
    --------
    >>> parse_line("  Alpha = 1  # first")
    ('alpha', '1')
    >>> parse_line("# only a comment") is None
    True
    >>> parse_line("=oops", 4)
    Traceback (most recent call last):
    ...
    lib_hash_config.domain.errors.LineFormatError: Config parse error: Line 4: Empty key string.
    """

    content = text.split("#", 1)[0].strip(_WHITESPACE)
    if not content:
        return None
    if content[0] == "=":
        raise LineFormatError(line_number, EMPTY_KEY)

    boundary = _KEY_END.search(content)
    end = boundary.start() if boundary else len(content)
    key = content[:end].lower()
    rest = content[end:].lstrip(_WHITESPACE)
    if not rest.startswith("="):
        raise LineFormatError(line_number, MISSING_SEPARATOR)
    return key, rest[1:].lstrip(_WHITESPACE)


def load(
    store: ConfigStore,
    stream: TextSource,
    *,
    chunk_size: int = CHUNK_SIZE,
    source: str | None = None,
) -> int:
    """Insert every entry of *stream* into *store*; return how many lines produced one.

    Redefinitions overwrite the earlier value and are reported as warnings.
    The first structural error aborts the load; entries inserted before it stay
    in *store*. *stream* is left open on every path.
    """

    loaded = 0
    for line_number, text in iter_lines(stream, chunk_size=chunk_size, source=source):
        try:
            parsed = parse_line(text, line_number)
        except LineFormatError as exc:
            log_error("parse_error", source=source, line=line_number, reason=exc.reason)
            raise
        if parsed is None:
            continue
        key, value = parsed
        if key in store:
            log_warning("duplicate_key", source=source, line=line_number, key=key)
        store.set(key, value)
        loaded += 1
    log_debug("config_loaded", **make_event("load", source, {"lines": loaded, "entries": len(store)}))
    return loaded


def load_path(store: ConfigStore, path: str | Path, *, chunk_size: int = CHUNK_SIZE) -> int:
    """Open *path*, :func:`load` it into *store*, and close it again on every path."""

    target = Path(path)
    with target.open("r", encoding="utf-8") as handle:
        return load(store, handle, chunk_size=chunk_size, source=str(target))


def loads(text: str, store: ConfigStore | None = None) -> ConfigStore:
    """Parse *text* into *store* (a fresh one by default) and return it.

    Examples
    --------
    >>> loads("Mode=fast\\n")["mode"]
    'fast'
    """

    target = ConfigStore() if store is None else store
    load(target, io.StringIO(text))
    return target


def write(store: ConfigStore, stream: TextSink) -> int:
    """Emit ``key=value`` for every live entry in slot order; return the count."""

    written = 0
    for key, value in store.entries():
        stream.write(f"{key}={value}\n")
        written += 1
    log_debug("config_written", entries=written)
    return written


def dumps(store: ConfigStore) -> str:
    """Return the line-format rendering of *store*."""

    buffer = io.StringIO()
    write(store, buffer)
    return buffer.getvalue()
