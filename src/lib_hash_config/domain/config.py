"""Domain-level configuration store.

Purpose
-------
Anchor the mutable :class:`ConfigStore` entity that wraps the hash engine and
carries textual configuration between the line format, the wire format, and
the tuning code that consumes it. This module contains no I/O.

Contents
--------
* :class:`ConfigStore` – ``MutableMapping[str, str]`` with case-insensitive
  keys, first-writer-wins merging, and structural deep copies.

System Role
-----------
Both text protocols build on :meth:`ConfigStore.set` and on slot-order
iteration; they never reach into :class:`~lib_hash_config.domain.table.HashTable`
directly except to pre-size it through :meth:`ConfigStore.reserve`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, MutableMapping
from typing import Iterator, TypeVar, overload

from .table import INITIAL_LOGSIZE, HashTable

T = TypeVar("T")


class ConfigStore(MutableMapping[str, str]):
    """Case-insensitive string-to-string configuration store.

    Why
    ----
    Configuration arrives from several sources (files, the network, defaults)
    and must be combined, copied, and shipped across process boundaries with
    predictable semantics.

    What
    ----
    Delegates storage to a :class:`HashTable`. Lookups ignore key case;
    iteration follows table slot order, not insertion order.

    Examples
    --------
    >>> store = ConfigStore()
    >>> store.set("Strategy", "nelder-mead")
    True
    >>> store.get("STRATEGY")
    'nelder-mead'
    >>> store.set("strategy", None), store.get("strategy")
    (True, None)
    """

    __slots__ = ("_table",)

    def __init__(self, logsize: int = INITIAL_LOGSIZE) -> None:
        self._table = HashTable(logsize)

    @property
    def logsize(self) -> int:
        """Base-2 logarithm of the slot count."""

        return self._table.logsize

    @property
    def capacity(self) -> int:
        return self._table.capacity

    def __getitem__(self, key: str) -> str:
        entry = self._table.lookup(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __setitem__(self, key: str, value: str) -> None:
        self._table.insert(key, value)

    def __delitem__(self, key: str) -> None:
        if not self._table.delete(key):
            raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (entry.key for entry in self._table.entries())

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._table.lookup(key) is not None

    def __repr__(self) -> str:
        return f"ConfigStore({dict(self.entries())!r})"

    @overload
    def get(self, key: str) -> str | None: ...

    @overload
    def get(self, key: str, default: T) -> str | T: ...

    def get(self, key: str, default: object = None) -> object:
        """Return the value stored under *key* or *default* when absent."""

        entry = self._table.lookup(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: str | None) -> bool:
        """Insert or replace *key*; a ``None`` value unsets it.

        Returns ``False`` only when asked to unset a key that is not present.
        """

        if value is None:
            return self.unset(key)
        self._table.insert(key, value)
        return True

    def unset(self, key: str) -> bool:
        """Remove *key*, returning whether it was present."""

        return self._table.delete(key)

    def entries(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` pairs in slot order without re-probing."""

        for entry in self._table.entries():
            yield entry.key, entry.value

    def merge(self, source: Mapping[str, str]) -> int:
        """Copy entries from *source* whose keys are absent here.

        Existing keys always win, so repeated merges keep the first writer's
        value. Returns the number of keys added.

        Examples
        --------
        >>> dst = ConfigStore(); _ = dst.set("a", "dst")
        >>> src = ConfigStore(); _ = src.set("A", "src"); _ = src.set("b", "src")
        >>> dst.merge(src), dst["a"], dst["b"]
        (1, 'dst', 'src')
        """

        added = 0
        for key, value in list(source.items()):
            if key in self:
                continue
            self._table.insert(key, value)
            added += 1
        return added

    def copy(self) -> ConfigStore:
        """Return an independent store with the same entries and table size."""

        twin = ConfigStore.__new__(ConfigStore)
        twin._table = self._table.clone()
        return twin

    def clear(self) -> None:
        """Release every entry; the table keeps its current size."""

        self._table.clear()

    def reserve(self, logsize: int) -> None:
        """Resize the underlying table to ``2 ** logsize`` slots in one step."""

        self._table.resize(logsize)

    def as_dict(self) -> dict[str, str]:
        """Return a plain ``dict`` snapshot of the entries."""

        return dict(self.entries())

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the entries to JSON with sorted keys.

        Examples
        --------
        >>> store = ConfigStore(); _ = store.set("b", "2"); _ = store.set("a", "1")
        >>> store.to_json()
        '{"a":"1","b":"2"}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
