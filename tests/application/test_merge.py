from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from lib_hash_config.application.merge import merge, merge_layers
from lib_hash_config.domain.config import ConfigStore

KEY = st.text(alphabet="abcdefAB_", min_size=1, max_size=4)
MAPPING = st.dictionaries(KEY, st.text(max_size=5), max_size=12)


def _store(data: dict[str, str]) -> ConfigStore:
    store = ConfigStore()
    for key, value in data.items():
        store[key] = value
    return store


def test_existing_keys_are_never_overwritten() -> None:
    dst = _store({"seed": "42", "budget": "10"})
    src = _store({"SEED": "7", "strategy": "pro"})
    assert merge(dst, src) == 1
    assert dst.as_dict() == {"seed": "42", "budget": "10", "strategy": "pro"}
    assert src["seed"] == "7"


def test_merge_accepts_plain_mappings() -> None:
    dst = ConfigStore()
    merge(dst, {"a": "1"})
    merge(dst, {"A": "2", "b": "2"})
    assert dst["a"] == "1"
    assert dst["b"] == "2"


def test_merge_into_itself_changes_nothing() -> None:
    store = _store({"a": "1"})
    assert merge(store, store) == 0
    assert store.as_dict() == {"a": "1"}


def test_merge_layers_reports_provenance() -> None:
    merged, origin = merge_layers(
        [
            ("cli", {"Strategy": "pro"}),
            ("session", _store({"strategy": "random", "budget": "50"})),
            ("defaults", {"budget": "10", "seed": "1"}),
        ]
    )
    assert merged["strategy"] == "pro"
    assert merged["budget"] == "50"
    assert merged["seed"] == "1"
    assert origin == {"strategy": "cli", "budget": "session", "seed": "defaults"}


def test_merge_layers_without_layers_is_empty() -> None:
    merged, origin = merge_layers([])
    assert len(merged) == 0
    assert origin == {}


@given(MAPPING, MAPPING)
def test_first_writer_wins(lhs: dict[str, str], rhs: dict[str, str]) -> None:
    dst = _store(lhs)
    before = dst.copy()
    src = _store(rhs)

    merge(dst, src)

    for key, value in before.entries():
        assert dst[key] == value
    for key, value in src.entries():
        if key not in before:
            assert dst[key] == value
    assert len(dst) == len(before) + sum(1 for key in src if key not in before)


@given(MAPPING, MAPPING, MAPPING)
def test_merge_is_associative(first: dict[str, str], second: dict[str, str], third: dict[str, str]) -> None:
    left = _store(first)
    merge(left, _store(second))
    merge(left, _store(third))

    tail = _store(second)
    merge(tail, _store(third))
    right = _store(first)
    merge(right, tail)

    assert {k.lower(): v for k, v in left.entries()} == {k.lower(): v for k, v in right.entries()}
