"""``python -m lib_hash_config`` entry point; runs the same CLI as the console script."""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main(sys.argv[1:]))
