"""Adapter contract tests for the default ports implementation.

Verify the default codecs and ordinary Python streams keep satisfying the
application-layer ports in ``src/lib_hash_config/application/ports.py`` so
callers can swap stream and codec implementations freely.
"""

from __future__ import annotations

import io
from pathlib import Path

from lib_hash_config.adapters.line_format.default import DefaultLineCodec
from lib_hash_config.adapters.wire.default import DefaultWireCodec
from lib_hash_config.application import ports
from lib_hash_config.domain.config import ConfigStore


def test_line_codec_contract() -> None:
    """DefaultLineCodec must fulfil LineCodec and read what it writes."""

    codec = DefaultLineCodec()
    assert isinstance(codec, ports.LineCodec)

    store = ConfigStore()
    store["strategy"] = "pro"
    buffer = io.StringIO()
    codec.write(store, buffer)
    buffer.seek(0)
    clone = ConfigStore()
    codec.load(clone, buffer)
    assert clone == store


def test_wire_codec_contract() -> None:
    """DefaultWireCodec must fulfil WireCodec."""

    assert isinstance(DefaultWireCodec(), ports.WireCodec)


def test_standard_streams_are_sources_and_sinks(tmp_path: Path) -> None:
    """In-memory buffers and real files satisfy the stream ports."""

    buffer = io.StringIO()
    assert isinstance(buffer, ports.TextSource)
    assert isinstance(buffer, ports.TextSink)

    path = tmp_path / "sample.cfg"
    path.write_text("a=1\n", encoding="utf-8")
    with path.open("r", encoding="utf-8") as handle:
        assert isinstance(handle, ports.TextSource)
