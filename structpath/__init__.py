"""
structpath — Immutable path-addressed updates for nested data
=============================================================

Read, test and rewrite values deep inside trees of lists and dicts without
ever mutating the tree you were given:

    data = {"a": {"b": 1}, "c": {"d": 2}}

    get("a.b", data)                        → 1
    has(["a", "x"], data)                   → False
    new = set_at_path("a.b", 99, data)      → {"a": {"b": 99}, "c": {"d": 2}}
    new["c"] is data["c"]                   → True
    merge({"a": {"x": 1}}, {"a": {"y": 2}}) → {"a": {"x": 1, "y": 2}}

Writes copy only the containers on the path (copy-on-write); every other
subtree is shared between the old and the new root.
"""

import logging

from structpath.config import (
    Settings, configure, get_settings, override_settings, reset_settings,
)
from structpath.core import (
    # Classification
    NodeKind,
    ATOMIC_MARKER,
    kind_of,
    is_atomic,
    is_cloneable,
    is_empty_key,
    # Container factory
    clone_if_possible,
    get_shallow_clone,
    # Path walker
    get_deep_clone,
    get_nested_property,
    has_nested_property,
)
from structpath.errors import IndexGapError, PathSyntaxError, ShapeCloneError, StructPathError
from structpath.merge import deep_merge
from structpath.ops import (
    add, assign, get, get_or, has, is_at, merge, merge_at, remove,
    set_at_path, update,
)
from structpath.paths import create, get_parsed_path, parse

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "get", "get_or", "has", "is_at",
    "set_at_path", "update", "remove", "add", "assign", "merge", "merge_at",
    "deep_merge",
    "NodeKind", "ATOMIC_MARKER", "kind_of", "is_atomic", "is_cloneable",
    "is_empty_key", "clone_if_possible", "get_shallow_clone",
    "get_deep_clone", "get_nested_property", "has_nested_property",
    "parse", "create", "get_parsed_path",
    "Settings", "configure", "get_settings", "override_settings",
    "reset_settings",
    "StructPathError", "PathSyntaxError", "ShapeCloneError", "IndexGapError",
]
