"""Application-layer merge policy.

Purpose
-------
Combine configuration from several sources (command-line overrides, session
files, built-in defaults) into one :class:`ConfigStore`. The policy is
first-writer-wins: a key, once present in the destination, is never replaced
by a later source.

Contents
    - ``merge``: fold one source into an existing destination store.
    - ``merge_layers``: build a fresh store from ordered layers and report which
      layer supplied each key.

System Role
-----------
Free of I/O so the CLI and :mod:`lib_hash_config.core` can share it. Layers
are ordered from *highest* to *lowest* precedence, the reverse of an
overwriting merge.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable

from ..domain.config import ConfigStore
from ..observability import log_debug


def merge(destination: ConfigStore, source: Mapping[str, str]) -> int:
    """Insert every key of *source* that *destination* does not already hold.

    Returns
    -------
    int
        Number of keys added to *destination*.

    Examples
    --------
    >>> dst = ConfigStore(); dst["seed"] = "42"
    >>> merge(dst, {"SEED": "7", "budget": "100"})
    1
    >>> dst["seed"], dst["budget"]
    ('42', '100')
    """

    added = destination.merge(source)
    log_debug("config_merged", added=added, skipped=len(source) - added, total=len(destination))
    return added


def merge_layers(
    layers: Iterable[tuple[str, Mapping[str, str]]],
) -> tuple[ConfigStore, dict[str, str]]:
    """Merge named *layers* into a new store, earliest layer winning.

    Parameters
    ----------
    layers:
        Iterable of ``(layer_name, mapping)`` tuples ordered from highest to
        lowest precedence.

    Returns
    -------
    tuple[ConfigStore, dict[str, str]]
        ``(merged, provenance)`` where ``provenance`` maps each lowercased key
        to the name of the layer that supplied its value.

    Examples
    --------
    >>> merged, origin = merge_layers([
    ...     ("cli", {"strategy": "pro"}),
    ...     ("defaults", {"strategy": "random", "seed": "1"}),
    ... ])
    >>> merged["strategy"], origin["strategy"], origin["seed"]
    ('pro', 'cli', 'defaults')
    """

    merged = ConfigStore()
    provenance: dict[str, str] = {}
    for layer_name, data in layers:
        for key, value in list(data.items()):
            if key in merged:
                continue
            merged[key] = value
            provenance[key.lower()] = layer_name
        log_debug("layer_merged", layer=layer_name, total=len(merged))
    return merged, provenance
