from __future__ import annotations

import io
from pathlib import Path

import pytest

import lib_hash_config as hcfg
from lib_hash_config.domain.table import hash_key


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_operations_surface_round_trip() -> None:
    store = hcfg.create()
    assert hcfg.set(store, "Strategy", "pro") is True
    assert hcfg.get(store, "strategy") == "pro"

    clone = hcfg.copy(store)
    hcfg.set(clone, "strategy", None)
    assert hcfg.get(clone, "strategy") is None
    assert hcfg.get(store, "strategy") == "pro"

    buffer = io.StringIO()
    assert hcfg.write(store, buffer) == 1
    reloaded = hcfg.create()
    buffer.seek(0)
    assert hcfg.load(reloaded, buffer) == 1
    assert hcfg.get(reloaded, "strategy") == "pro"

    wired = hcfg.create()
    hcfg.deserialize(wired, hcfg.serialize(store))
    assert hcfg.get(wired, "STRATEGY") == "pro"

    hcfg.destroy(store)
    assert len(store) == 0


def test_unset_and_merge() -> None:
    dst = hcfg.create()
    hcfg.set(dst, "a", "1")
    src = hcfg.create()
    hcfg.set(src, "a", "2")
    hcfg.set(src, "b", "2")
    assert hcfg.merge(dst, src) == 1
    assert hcfg.get(dst, "a") == "1"
    assert hcfg.unset(dst, "b") is True
    assert hcfg.unset(dst, "b") is False


def test_read_files_layers_paths_and_defaults(tmp_path: Path) -> None:
    session = write(tmp_path / "session.cfg", "budget=50\n")
    site = write(tmp_path / "site" / "site.cfg", "Budget=20\nstrategy=random\n")
    store, origin = hcfg.read_files([session, site], defaults={"seed": "1", "strategy": "pro"})
    assert store.as_dict() == {"budget": "50", "strategy": "random", "seed": "1"}
    assert origin == {"budget": str(session), "strategy": str(site), "seed": "defaults"}


def test_read_files_propagates_parse_errors(tmp_path: Path) -> None:
    broken = write(tmp_path / "broken.cfg", "ok=1\nnot valid\n")
    with pytest.raises(hcfg.LineFormatError) as excinfo:
        hcfg.read_files([broken])
    assert excinfo.value.line_number == 2


def test_load_path_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        hcfg.load_path(hcfg.create(), tmp_path / "absent.cfg")


def test_growth_keeps_keys_reachable_through_public_api() -> None:
    store = hcfg.create()
    for index in range(131):
        hcfg.set(store, f"k{index}", str(index))
    assert store.logsize == 9
    assert all(hcfg.get(store, f"K{index}") == str(index) for index in range(131))


def test_deleting_first_colliding_key_keeps_second() -> None:
    """Removing one key must not hide another key that probed past it."""

    buckets: dict[int, str] = {}
    index = 0
    while True:
        key = f"c{index}"
        home = hash_key(key, 8)
        if home in buckets:
            first, second = buckets[home], key
            break
        buckets[home] = key
        index += 1

    store = hcfg.create()
    hcfg.set(store, first, "1")
    hcfg.set(store, second, "2")
    hcfg.set(store, first, None)
    assert hcfg.get(store, second) == "2"
