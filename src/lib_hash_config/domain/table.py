"""Open-addressing hash engine behind :class:`~lib_hash_config.domain.config.ConfigStore`.

Purpose
-------
Map case-insensitive string keys to string values in a power-of-two slot
array. Collisions are resolved by linear probing; the table doubles once the
load factor passes :data:`GROWTH_THRESHOLD` percent so at least one empty slot
always terminates a probe.

Contents
--------
* :func:`hash_key` – FNV-1a 32-bit digest folded down to ``logsize`` bits.
* :class:`Entry` – immutable ``(key, value)`` pair occupying one slot.
* :class:`HashTable` – find / insert / delete / resize over the slot array.

System Role
-----------
Nothing outside :mod:`lib_hash_config.domain` touches the slot array. The
config store and both text protocols only use the operations exposed here, and
enumeration order is slot order, never insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterator

from ..observability import log_debug, log_warning
from .errors import TableFullError

FNV_OFFSET_BASIS: Final[int] = 0x811C9DC5
FNV_PRIME: Final[int] = 0x01000193
_MASK_32: Final[int] = 0xFFFFFFFF

INITIAL_LOGSIZE: Final[int] = 8
GROWTH_THRESHOLD: Final[int] = 50
LOGSIZE_WARNING: Final[int] = 16


def hash_key(key: str, logsize: int) -> int:
    """Return the home slot of *key* in a table of ``2 ** logsize`` slots.

    The UTF-8 bytes of the lowercased key are mixed with FNV-1a; the high bits
    of the 32-bit digest are then XOR-folded into the low bits before masking so
    small tables still see the whole digest.

    Examples
    --------
    >>> hash_key("Alpha", 8) == hash_key("alpha", 8)
    True
    >>> 0 <= hash_key("alpha", 4) < 16
    True
    """

    digest = FNV_OFFSET_BASIS
    for byte in key.lower().encode("utf-8"):
        digest ^= byte
        digest = (digest * FNV_PRIME) & _MASK_32
    return ((digest >> logsize) ^ digest) & ((1 << logsize) - 1)


@dataclass(frozen=True, slots=True)
class Entry:
    """A live ``(key, value)`` pair. Empty slots hold ``None`` instead."""

    key: str
    value: str


class HashTable:
    """Linear-probing table of :class:`Entry` slots with load-factor growth.

    Examples
    --------
    >>> table = HashTable(logsize=2)
    >>> table.insert("Mode", "fast")
    >>> table.lookup("MODE").value
    'fast'
    >>> table.delete("mode"), table.lookup("mode")
    (True, None)
    """

    __slots__ = ("_slots", "_count", "_logsize")

    def __init__(self, logsize: int = INITIAL_LOGSIZE) -> None:
        _check_logsize(logsize)
        self._slots: list[Entry | None] = [None] * (1 << logsize)
        self._count = 0
        self._logsize = logsize

    @property
    def logsize(self) -> int:
        return self._logsize

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._count

    def find(self, key: str) -> int | None:
        """Return the slot holding *key*, or the empty slot where it belongs.

        ``None`` means the probe wrapped back to the home slot without meeting
        either, i.e. the table is full and *key* is absent.
        """

        folded = key.lower()
        mask = len(self._slots) - 1
        home = index = hash_key(key, self._logsize)
        while True:
            entry = self._slots[index]
            if entry is None or entry.key.lower() == folded:
                return index
            index = (index + 1) & mask
            if index == home:
                return None

    def lookup(self, key: str) -> Entry | None:
        """Return the live entry for *key* (case-insensitive) or ``None``."""

        index = self.find(key)
        if index is None:
            return None
        return self._slots[index]

    def insert(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing only the value when *key* exists.

        New keys are stored exactly as given. Crossing the growth threshold
        doubles the table; a failed growth is logged and the insert still stands.
        """

        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError("configuration keys and values must be str")
        index = self.find(key)
        if index is None:
            raise TableFullError(f"No free slot for key {key!r} in a table of {self.capacity} slots")

        existing = self._slots[index]
        if existing is not None:
            self._slots[index] = Entry(existing.key, value)
            return

        self._slots[index] = Entry(key, value)
        self._count += 1
        if (self._count * 100) // len(self._slots) > GROWTH_THRESHOLD:
            try:
                self.resize(self._logsize + 1)
            except MemoryError:
                log_warning("hash_growth_failed", logsize=self._logsize, count=self._count)

    def delete(self, key: str) -> bool:
        """Remove *key*; return ``False`` when it was not present.

        The vacated slot is refilled by back-shifting later members of the same
        probe cluster, so no tombstones are needed and every remaining key stays
        reachable from its home slot.
        """

        index = self.find(key)
        if index is None or self._slots[index] is None:
            return False
        self._slots[index] = None
        self._count -= 1
        self._backshift(index)
        return True

    def resize(self, new_logsize: int) -> None:
        """Rehash every live entry into a table of ``2 ** new_logsize`` slots.

        Entries are relinked, not recreated. Raises :class:`TableFullError` when
        the new table could not keep an empty slot after holding them all.
        """

        if new_logsize == self._logsize:
            return
        _check_logsize(new_logsize)
        new_capacity = 1 << new_logsize
        if self._count >= new_capacity:
            raise TableFullError(f"Cannot fit {self._count} entries into {new_capacity} slots")

        new_slots: list[Entry | None] = [None] * new_capacity
        mask = new_capacity - 1
        for entry in self._slots:
            if entry is None:
                continue
            index = hash_key(entry.key, new_logsize)
            while new_slots[index] is not None:
                index = (index + 1) & mask
            new_slots[index] = entry

        self._slots = new_slots
        self._logsize = new_logsize
        log_debug("hash_resized", logsize=new_logsize, count=self._count)
        if new_logsize > LOGSIZE_WARNING:
            log_warning("hash_grew_beyond_expectation", logsize=new_logsize, count=self._count)

    def entries(self) -> Iterator[Entry]:
        """Yield live entries in slot order."""

        for entry in self._slots:
            if entry is not None:
                yield entry

    def clear(self) -> None:
        """Drop every entry while keeping the current table size."""

        self._slots = [None] * len(self._slots)
        self._count = 0

    def clone(self) -> HashTable:
        """Return an independent table with the same size and slot layout."""

        twin = HashTable.__new__(HashTable)
        twin._slots = list(self._slots)
        twin._count = self._count
        twin._logsize = self._logsize
        return twin

    def _backshift(self, hole: int) -> None:
        """Close the gap at *hole* by moving displaced cluster members backwards."""

        mask = len(self._slots) - 1
        index = (hole + 1) & mask
        entry = self._slots[index]
        while entry is not None:
            home = hash_key(entry.key, self._logsize)
            # movable unless its home lies cyclically in (hole, index]
            if (index - home) & mask >= (index - hole) & mask:
                self._slots[hole] = entry
                self._slots[index] = None
                hole = index
            index = (index + 1) & mask
            entry = self._slots[index]


def _check_logsize(logsize: int) -> None:
    if logsize < 1:
        raise ValueError(f"logsize must be at least 1, got {logsize}")
