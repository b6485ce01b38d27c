"""
structpath.ops — Public operations.

Every operation takes the path first and the tree last.  A path may be a
list or tuple of keys, a bare int, or a path expression string:

    get("users[0].name", data)
    set_at_path(["users", 0, "name"], "Ada", data)

Reads never fail on missing data.  Writes return a new root and leave the
tree they were given untouched; only the containers along the path are
copied.  An empty path (None, "", [] or ()) addresses the root itself.
"""

from typing import Any, Callable

from .core import (
    MISSING,
    NodeKind,
    delete_child,
    get_child,
    get_deep_clone,
    get_nested_property,
    get_shallow_clone,
    has_nested_property,
    is_empty_key,
    kind_of,
    set_child,
    value_or_none,
)
from .merge import deep_merge
from .paths import get_parsed_path


# ═══════════════════════════════════════════════════════════════════
#  READS
# ═══════════════════════════════════════════════════════════════════

def get(path, root: Any) -> Any:
    """The value at `path`, or None when any step is absent."""
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return root
    return get_nested_property(parsed, root)


def get_or(path, root: Any, default: Any) -> Any:
    """The value at `path`, or `default` when it is absent."""
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return default if root is None else root
    return get_nested_property(parsed, root, default)


def has(path, root: Any) -> bool:
    """Is there a value at `path`?  A stored None counts as a value."""
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return root is not None
    return has_nested_property(parsed, root)


def is_at(path, value: Any, root: Any) -> bool:
    """Is the value at `path` the same as, or equal to, `value`?"""
    current = get(path, root)
    return current is value or current == value


# ═══════════════════════════════════════════════════════════════════
#  WRITES
# ═══════════════════════════════════════════════════════════════════

def set_at_path(path, value: Any, root: Any) -> Any:
    """A new root with `value` stored at `path`."""
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return value

    def _set(container, key):
        set_child(container, key, value)

    return get_deep_clone(parsed, root, _set)


def update(path, fn: Callable[[Any], Any], root: Any) -> Any:
    """A new root with fn(current) stored at `path` (current is None when absent)."""
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return fn(root)

    def _update(container, key):
        set_child(container, key, fn(value_or_none(get_child(container, key))))

    return get_deep_clone(parsed, root, _update)


def remove(path, root: Any) -> Any:
    """
    A new root without the value at `path`.

    List items after a removed index shift down.  When nothing is stored at
    `path` the original root is returned as-is.  An int key on a mapping
    removes that key (or its decimal string) and leaves the mapping a
    mapping.
    """
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return None

    if not has_nested_property(parsed, root):
        return root

    return get_deep_clone(parsed, root, delete_child)


def add(path, value: Any, root: Any) -> Any:
    """
    Append `value` to the sequence at `path`.

    When the value at `path` is not a sequence, `value` is stored there
    instead, exactly as set_at_path would.
    """
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        if kind_of(root) is NodeKind.SEQUENCE:
            return [*root, value]
        return value

    current = get_nested_property(parsed, root, MISSING)
    if kind_of(current) is NodeKind.SEQUENCE:
        return set_at_path([*parsed, len(current)], value, root)

    return set_at_path(parsed, value, root)


def _assigned(current: Any, value: Any) -> Any:
    if kind_of(current) is NodeKind.MAPPING and kind_of(value) is NodeKind.MAPPING:
        merged = get_shallow_clone(current)
        for key, item in value.items():
            merged[key] = item
        return merged
    return value


def assign(path, value: Any, root: Any) -> Any:
    """
    Shallow-merge the mapping `value` into the mapping at `path`.

    Keys of `value` win; nested values are not merged.  When either side is
    not a mapping, `value` is stored as-is.
    """
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return _assigned(root, value)

    def _assign(container, key):
        set_child(container, key, _assigned(value_or_none(get_child(container, key)), value))

    return get_deep_clone(parsed, root, _assign)


def merge(base: Any, override: Any) -> Any:
    """Deep-merge two whole trees (see structpath.merge)."""
    return deep_merge(base, override)


def merge_at(path, value: Any, root: Any) -> Any:
    """A new root whose value at `path` is deep-merged with `value`."""
    parsed = get_parsed_path(path)
    if is_empty_key(parsed):
        return deep_merge(root, value)

    def _merge(container, key):
        set_child(container, key, deep_merge(value_or_none(get_child(container, key)), value))

    return get_deep_clone(parsed, root, _merge)
