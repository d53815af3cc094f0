"""Importing user modules from extra search roots."""

from __future__ import annotations

import importlib
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path


@contextmanager
def search_path(paths: Sequence[str | Path]) -> Iterator[None]:
    """Temporarily prepend ``paths`` to ``sys.path``."""
    added = [str(Path(p).expanduser().resolve()) for p in paths]
    if not added:
        yield
        return
    sys.path[:0] = added
    importlib.invalidate_caches()
    try:
        yield
    finally:
        for entry in added:
            try:
                sys.path.remove(entry)
            except ValueError:
                pass

