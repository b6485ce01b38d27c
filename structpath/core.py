"""
structpath.core — Copy-on-Write Path Traversal
===============================================

§1  THE PROBLEM
───────────────

Nested data built from lists and dicts is usually updated in place:

    config["server"]["tls"]["enabled"] = True

Every holder of `config` sees the change.  The alternative most code
reaches for, copy.deepcopy followed by an in-place write, is safe but pays
for every node in the tree to change one leaf.

structpath sits between the two.  A write at a path returns a NEW root in
which only the containers on the path are copied (one shallow clone per
step); every other subtree is shared by reference with the old root:

    old = {"a": {"b": 1}, "c": {"d": 2}}
    new = set_at_path(["a", "b"], 99, old)

    new["c"] is old["c"]       → True   (shared)
    new["a"] is old["a"]       → False  (on the path, cloned)
    old["a"]["b"]              → 1      (untouched)


§2  NODE KINDS
──────────────

Every value is exactly one of:

    SEQUENCE   list or tuple                     addressed by int index
    MAPPING    any collections.abc.Mapping       addressed by key
    LEAF       everything else                   opaque, never cloned

The tag is resolved once per value by kind_of().  Some values are shaped
like containers but are always leaves (the ATOMIC set): dates, times,
timedeltas, compiled regexes, types listed in Settings.atomic_types and any
type that sets the class attribute `__structpath_atomic__ = True`.

A path key also implies a kind: a non-negative int (not a bool) calls for
a SEQUENCE, anything else for a MAPPING.


§3  THE WALK
────────────

One recursive walker serves every path operation:

    read mode    descend while each step exists; short-circuit to the
                 no-match value at the first absent step; never allocate
    clone mode   the container handed in is already a private clone;
                 at each step clone-or-create the child, recurse, and
                 write the result back into the private parent

In clone mode a child is replaced by a fresh empty container when it is a
leaf OR when its kind disagrees with the next key:

    set_at_path(["x", "y"], 1, {"x": [1, 2, 3]})   → {"x": {"y": 1}}

A mapping is addressed by an index only when it already holds that index,
as an int or as its decimal string ("2024" in JSON-loaded data):

    set_at_path("years.2024", 1, {"years": {"2024": 0}})  → {"years": {"2024": 1}}

The walker mutates only containers it allocated during the same call.


§4  SHAPE FIDELITY
──────────────────

    list / tuple           → list(node)
    dict                   → dict(node)
    dict subclass          → copy.copy(node)     (OrderedDict, defaultdict, …)
    other MutableMapping   → type(node)() filled key by key
    anything else          → plain dict with the same items, with a
                             warning (or ShapeCloneError in strict mode)
"""

import copy
import datetime
import logging
import re
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Union

from .config import get_settings
from .errors import IndexGapError, ShapeCloneError
from .paths import get_parsed_path, is_index

logger = logging.getLogger(__name__)

ATOMIC_MARKER = "__structpath_atomic__"
ATOMIC_TYPES = (datetime.date, datetime.time, datetime.timedelta, re.Pattern)


class _Missing:
    """Marks a key that is not present (as opposed to present with None)."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


# ═══════════════════════════════════════════════════════════════════
#  CLONEABILITY CLASSIFIER
# ═══════════════════════════════════════════════════════════════════

class NodeKind(Enum):
    SEQUENCE = auto()
    MAPPING = auto()
    LEAF = auto()


def is_atomic(value: Any) -> bool:
    """Is the value in the atomic set (never cloned, never merged)?"""
    if isinstance(value, ATOMIC_TYPES):
        return True
    extra = get_settings().atomic_types
    if extra and isinstance(value, extra):
        return True
    return getattr(type(value), ATOMIC_MARKER, False) is True


def kind_of(value: Any) -> NodeKind:
    if isinstance(value, (list, tuple)):
        return NodeKind.LEAF if is_atomic(value) else NodeKind.SEQUENCE
    if isinstance(value, Mapping):
        return NodeKind.LEAF if is_atomic(value) else NodeKind.MAPPING
    return NodeKind.LEAF


def kind_for_key(key: Any) -> NodeKind:
    """The container kind a key addresses."""
    return NodeKind.SEQUENCE if is_index(key) else NodeKind.MAPPING


def is_cloneable(value: Any) -> bool:
    """Can the value be shallow-cloned and merged?"""
    return kind_of(value) is not NodeKind.LEAF


def is_empty_key(value: Any) -> bool:
    """None or an empty list/tuple: nothing to address."""
    return value is None or (isinstance(value, (list, tuple)) and not value)


# ═══════════════════════════════════════════════════════════════════
#  CONTAINER ACCESS
# ═══════════════════════════════════════════════════════════════════

def stored_key(node: Mapping, key: Any) -> Any:
    """
    The key `node` actually holds for `key`.

    Path expressions turn "2024" into the index 2024, while JSON-loaded
    mappings hold the string "2024".  An index that is not in the mapping
    falls back to its decimal string when that string is.
    """
    if key in node or not is_index(key):
        return key
    text = str(key)
    return text if text in node else key


def holds_key(node: Any, key: Any) -> bool:
    """Is `key` (or, for an index on a mapping, its decimal string) present?"""
    kind = kind_of(node)
    if kind is NodeKind.SEQUENCE:
        return is_index(key) and key < len(node)
    if kind is NodeKind.MAPPING:
        return stored_key(node, key) in node
    return False


def get_child(node: Any, key: Any, default: Any = MISSING) -> Any:
    """
    Read `key` from a container, or `default` when it is not there.

    Leaves (strings and atomic values included) have no children.  Mapping
    lookups test membership first so that defaultdict and friends are never
    written to by a read.
    """
    kind = kind_of(node)
    if kind is NodeKind.SEQUENCE:
        if is_index(key) and key < len(node):
            return node[key]
        return default
    if kind is NodeKind.MAPPING:
        key = stored_key(node, key)
        if key in node:
            return node[key]
        return default
    return default


def value_or_none(value: Any) -> Any:
    return None if value is MISSING else value


def set_child(container: Union[list, MutableMapping], key: Any, value: Any) -> None:
    """
    Write into a container this call owns.

    Writing past the end of a list pads the gap with None, up to
    Settings.max_index_gap slots; a wider gap raises IndexGapError.  A
    mapping write replaces the key it already holds (see stored_key).
    """
    if isinstance(container, list):
        if not is_index(key):
            raise TypeError(f"list positions must be non-negative ints, not {key!r}")
        gap = key - len(container)
        if gap < 0:
            container[key] = value
            return
        limit = get_settings().max_index_gap
        if limit is not None and gap > limit:
            raise IndexGapError(key, len(container), limit)
        container.extend([None] * gap)
        container.append(value)
        return

    container[stored_key(container, key)] = value


def delete_child(container: Union[list, MutableMapping], key: Any) -> None:
    """Remove a key from a container this call owns; list items shift down."""
    if isinstance(container, list):
        if is_index(key) and key < len(container):
            del container[key]
        return

    key = stored_key(container, key)
    if key in container:
        del container[key]


# ═══════════════════════════════════════════════════════════════════
#  CONTAINER FACTORY
# ═══════════════════════════════════════════════════════════════════

def get_new_empty_child(key: Any) -> Union[list, dict]:
    """A fresh container of the kind `key` addresses."""
    return [] if is_index(key) else {}


def get_new_empty_object(node: Any) -> Union[list, dict]:
    """A fresh container of the same kind as `node`."""
    return [] if isinstance(node, (list, tuple)) else {}


def _degraded_clone(node: Mapping) -> dict:
    if get_settings().strict_shapes:
        raise ShapeCloneError(type(node))
    logger.warning(
        "Cloning %s as a plain dict: the type cannot be rebuilt generically",
        type(node).__qualname__,
    )
    return dict(node)


def get_shallow_clone(node: Any) -> Union[list, MutableMapping]:
    """
    One-level copy of a cloneable node; children are shared by reference.

    Sequences always come back as plain lists.  Mappings keep their type
    when it can be rebuilt generically (see §4 above).
    """
    if isinstance(node, (list, tuple)):
        return list(node)

    if type(node) is dict:
        return dict(node)

    if isinstance(node, dict):
        return copy.copy(node)

    if isinstance(node, MutableMapping):
        try:
            clone = type(node)()
        except TypeError:
            return _degraded_clone(node)
        for key, value in node.items():
            clone[key] = value
        return clone

    return _degraded_clone(node)


def clone_if_possible(value: Any) -> Any:
    """Shallow-clone containers; return leaves unchanged."""
    return get_shallow_clone(value) if is_cloneable(value) else value


def get_new_child_clone(node: Any, next_key: Any) -> Union[list, MutableMapping]:
    """
    The private container to descend into when `next_key` comes next.

    A leaf, or a container whose kind disagrees with `next_key`, is
    discarded in favour of a fresh empty container of the right kind.  A
    mapping that already holds an index key is not a disagreement.
    """
    kind = kind_of(node)
    if kind is NodeKind.LEAF:
        return get_new_empty_child(next_key)

    if kind is not kind_for_key(next_key) and not holds_key(node, next_key):
        logger.debug(
            "Replacing %s with an empty %s to hold key %r",
            kind.name.lower(), kind_for_key(next_key).name.lower(), next_key,
        )
        return get_new_empty_child(next_key)

    return get_shallow_clone(node)


# ═══════════════════════════════════════════════════════════════════
#  PATH WALKER
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Walk:
    """
    How to walk a path.

    on_match:        called as on_match(container, last_key) at the final
                     step; its return value is the read result (read mode)
                     or ignored after it writes (clone mode)
    should_clone:    clone mode when True, read mode otherwise
    no_match_value:  read-mode result when a step is absent
    """
    on_match: Callable[[Any, Any], Any]
    should_clone: bool = False
    no_match_value: Any = None


def on_match_at_path(path, node: Any, walk: Walk, index: int = 0) -> Any:
    """
    Walk `path` from `index` down through `node`.

    Read mode returns on_match's result or walk.no_match_value.  Clone mode
    returns `node` itself, which must be a container owned by the caller,
    after the change has been written into it.
    """
    key = path[index]
    next_index = index + 1

    if next_index == len(path):
        if walk.should_clone:
            walk.on_match(node, key)
            return node
        if node is None or node is MISSING:
            return walk.no_match_value
        return walk.on_match(node, key)

    if walk.should_clone:
        child = get_new_child_clone(get_child(node, key), path[next_index])
        set_child(node, key, on_match_at_path(path, child, walk, next_index))
        return node

    child = get_child(node, key)
    if child is MISSING or child is None:
        return walk.no_match_value
    return on_match_at_path(path, child, walk, next_index)


# ═══════════════════════════════════════════════════════════════════
#  READ / WRITE PRIMITIVES
# ═══════════════════════════════════════════════════════════════════

def get_nested_property(path, root: Any, default: Any = None) -> Any:
    """
    Value at a non-empty path, or `default` when any step is absent.

    A stored None is returned as None; only absence yields `default`.
    """
    parsed = get_parsed_path(path)

    if len(parsed) == 1:
        return get_child(root, parsed[0], default)

    return on_match_at_path(
        parsed,
        root,
        Walk(lambda node, key: get_child(node, key, default), no_match_value=default),
    )


def has_nested_property(path, root: Any) -> bool:
    """Does every step of a non-empty path exist?  A stored None counts."""
    parsed = get_parsed_path(path)

    if len(parsed) == 1:
        return get_child(root, parsed[0]) is not MISSING

    return on_match_at_path(
        parsed,
        root,
        Walk(lambda node, key: get_child(node, key) is not MISSING, no_match_value=False),
    )


def get_deep_clone(path, root: Any, on_match: Callable[[Any, Any], Any]) -> Any:
    """
    Copy-on-write along a non-empty path.

    Builds the private top-level container (a shallow clone of `root`, or a
    fresh container for the first key when `root` is a leaf), clones every
    container on the path, and calls on_match(container, last_key) on the
    private parent of the target so it can set, delete or transform that
    key.  Returns the new root; `root` itself is never modified.
    """
    parsed = get_parsed_path(path)
    first = parsed[0]
    kind = kind_of(root)

    if kind is NodeKind.LEAF:
        top = get_new_empty_child(first)
    elif kind is NodeKind.SEQUENCE and not is_index(first):
        # A list cannot hold a name; mappings do accept int keys.
        logger.debug("Replacing sequence root with a mapping to hold key %r", first)
        top = {}
    else:
        top = get_shallow_clone(root)

    if len(parsed) == 1:
        on_match(top, first)
        return top

    return on_match_at_path(parsed, top, Walk(on_match, should_clone=True))
