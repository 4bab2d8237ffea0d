from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Mapping


def _apply(values: Mapping[str, str | None]) -> None:
    for key, value in values.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@contextmanager
def env_scope(values: Mapping[str, str | None]) -> Iterator[None]:
    """Set (or unset, for None) environment variables for the block."""
    previous = {key: os.environ.get(key) for key in values}
    _apply(values)
    try:
        yield
    finally:
        _apply(previous)
