"""
structpath.config — Process-wide settings.

Settings are an immutable snapshot.  Changing them swaps the snapshot;
operations read it once per call, so a tree operation never observes a
half-applied change.

    configure(strict_shapes=True)
    with override_settings(atomic_types=(Decimal,)):
        ...
"""

import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Optional

ENV_STRICT_SHAPES = "STRUCTPATH_STRICT_SHAPES"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class Settings:
    """
    strict_shapes:    raise ShapeCloneError instead of degrading a mapping
                      that cannot be rebuilt in its own type to a plain dict
    atomic_types:     extra types that are always leaves, on top of dates,
                      times, timedeltas and compiled regexes
    parse_cache_size: number of parsed path strings kept in memory
    max_index_gap:    how many None slots a single list write may pad in;
                      None lifts the limit
    """
    strict_shapes: bool = False
    atomic_types: tuple[type, ...] = ()
    parse_cache_size: int = 256
    max_index_gap: Optional[int] = 10_000


def _from_environment() -> Settings:
    strict = os.environ.get(ENV_STRICT_SHAPES, "").strip().lower() in _TRUTHY
    return Settings(strict_shapes=strict)


_settings = _from_environment()


def get_settings() -> Settings:
    return _settings


def configure(**changes) -> Settings:
    """Replace the named fields of the current settings and return the result."""
    global _settings
    _settings = replace(_settings, **changes)
    return _settings


def reset_settings() -> Settings:
    """Go back to the defaults (environment included)."""
    global _settings
    _settings = _from_environment()
    return _settings


@contextmanager
def override_settings(**changes) -> Iterator[Settings]:
    """Apply `changes` for the duration of a with-block."""
    global _settings
    previous = _settings
    _settings = replace(previous, **changes)
    try:
        yield _settings
    finally:
        _settings = previous
