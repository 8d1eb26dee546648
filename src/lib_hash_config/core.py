"""Composition root for ``lib_hash_config``.

Purpose
-------
Provide the flat operations surface consumed by the tuning framework
(``create``, ``copy``, ``get``, ``set``, ``load``, ``write``, ``merge``,
``serialize``, ``deserialize``) and the file-level helpers the CLI builds on.
Each function delegates to the domain entity or to one adapter; the module
holds no state of its own.

Contents
--------
* :func:`create` / :func:`copy` / :func:`destroy` – store lifecycle.
* :func:`get` / :func:`set` / :func:`unset` – entry access.
* :func:`load` / :func:`load_path` / :func:`write` – line format.
* :func:`serialize` / :func:`deserialize` – wire format.
* :func:`merge` / :func:`read_files` – first-writer-wins combination.

System Role
-----------
Connects adapters with the domain entity while emitting structured
observability signals. Callers that prefer methods can use
:class:`ConfigStore` directly; both paths share the same behaviour.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Iterable

from .adapters.line_format import default as line_format
from .adapters.wire import default as wire
from .application.merge import merge, merge_layers
from .application.ports import TextSink, TextSource
from .domain.config import ConfigStore
from .domain.errors import HashConfigError, InvalidFormat, LineFormatError, TableFullError, WireFormatError
from .observability import bind_trace_id, log_debug, log_info, make_event


def create() -> ConfigStore:
    """Return a new, empty store with the initial table size."""

    return ConfigStore()


def copy(store: ConfigStore) -> ConfigStore:
    """Return an independent deep copy of *store* with the same table size."""

    return store.copy()


def destroy(store: ConfigStore) -> None:
    """Release every entry held by *store*."""

    store.clear()


def get(store: ConfigStore, key: str) -> str | None:
    """Return the value under *key* or ``None`` when absent."""

    return store.get(key)


def set(store: ConfigStore, key: str, value: str | None) -> bool:  # noqa: A001 - mirrors the operation name
    """Insert, replace, or (with ``None``) remove *key*.

    Returns ``False`` only when removing a key that was not present.
    """

    return store.set(key, value)


def unset(store: ConfigStore, key: str) -> bool:
    """Remove *key*, returning whether it was present."""

    return store.unset(key)


def load(store: ConfigStore, stream: TextSource, *, source: str | None = None) -> int:
    """Parse line format from an open *stream* into *store*; the stream stays open."""

    return line_format.load(store, stream, source=source)


def load_path(store: ConfigStore, path: str | Path) -> int:
    """Parse the line-format file at *path* into *store*."""

    return line_format.load_path(store, path)


def write(store: ConfigStore, stream: TextSink) -> int:
    """Emit *store* as line format to *stream*."""

    return line_format.write(store, stream)


def serialize(store: ConfigStore) -> str:
    """Return the wire encoding of *store*."""

    return wire.serialize(store)


def deserialize(store: ConfigStore, text: str) -> int:
    """Decode wire *text* into *store*; return characters consumed."""

    return wire.deserialize(store, text)


def read_files(
    paths: Iterable[str | Path],
    *,
    defaults: Mapping[str, str] | None = None,
) -> tuple[ConfigStore, dict[str, str]]:
    """Load several line-format files, earlier files taking precedence.

    Why
    ----
    Operators layer a session file over site defaults; the first source to
    define a key decides its value.

    Parameters
    ----------
    paths:
        Files ordered from highest to lowest precedence.
    defaults:
        Optional lowest-precedence values merged last.

    Returns
    -------
    tuple[ConfigStore, dict[str, str]]
        ``(store, provenance)`` where ``provenance`` maps each lowercased key to
        the path (or ``"defaults"``) that supplied it.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> first = Path(tmp.name) / "session.cfg"
    >>> _ = first.write_text("Budget=50\\n", encoding="utf-8")
    >>> store, origin = read_files([first], defaults={"budget": "10", "seed": "1"})
    >>> store["budget"], store["seed"], origin["seed"]
    ('50', '1', 'defaults')
    >>> tmp.cleanup()
    """

    bind_trace_id(None)
    layers: list[tuple[str, Mapping[str, str]]] = []
    for path in paths:
        layer = ConfigStore()
        line_format.load_path(layer, path)
        layers.append((str(path), layer))
        log_debug("layer_loaded", **make_event("read", str(path), {"entries": len(layer)}))
    if defaults:
        layers.append(("defaults", defaults))

    store, provenance = merge_layers(layers)
    log_info("configuration_merged", total_layers=len(layers), entries=len(store))
    return store, provenance


__all__ = [
    "ConfigStore",
    "HashConfigError",
    "InvalidFormat",
    "LineFormatError",
    "WireFormatError",
    "TableFullError",
    "create",
    "copy",
    "destroy",
    "get",
    "set",
    "unset",
    "load",
    "load_path",
    "write",
    "merge",
    "serialize",
    "deserialize",
    "read_files",
]
