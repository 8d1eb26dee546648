"""Public package surface for the case-insensitive configuration store.

``import lib_hash_config`` exposes the :class:`ConfigStore` entity, the flat
operations from :mod:`lib_hash_config.core`, the error taxonomy, and the
logging hooks applications use to route diagnostics.
"""

from __future__ import annotations

from .core import (
    copy,
    create,
    deserialize,
    destroy,
    get,
    load,
    load_path,
    merge,
    read_files,
    serialize,
    set,
    unset,
    write,
)
from .domain.config import ConfigStore
from .domain.errors import HashConfigError, InvalidFormat, LineFormatError, TableFullError, WireFormatError
from .observability import bind_trace_id, get_logger

__all__ = [
    "ConfigStore",
    "HashConfigError",
    "InvalidFormat",
    "LineFormatError",
    "WireFormatError",
    "TableFullError",
    "bind_trace_id",
    "get_logger",
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
