"""
structpath.merge — Deep merge of two whole trees.

    deep_merge({"a": {"x": 1}}, {"a": {"y": 2}})   → {"a": {"x": 1, "y": 2}}
    deep_merge([1, 2], [3, 4])                     → [1, 2, 3, 4]
    deep_merge({"a": 1}, [1, 2])                   → [1, 2]   (a fresh list)

RULES:
    1. Kinds differ (or either side is a leaf) → a shallow clone of the
       override, or the override itself when it is a leaf.  An absent base
       therefore behaves as the empty container of the override's kind.
    2. Two sequences → concatenation: base items by reference, then each
       override item through clone_if_possible.  Items are never merged
       position by position.
    3. Two mappings → a plain dict holding every base key (values through
       clone_if_possible), then for each override key:
         • cloneable value → merged recursively with the base value
         • leaf value      → overwrites as-is
       Key order: base keys in base order, then override-only keys in
       override order.

Neither input is modified.
"""

import logging
from typing import Any

from .core import NodeKind, clone_if_possible, is_cloneable, kind_of

logger = logging.getLogger(__name__)


def deep_merge(base: Any, override: Any) -> Any:
    """Merge `override` into `base`, returning a new tree."""
    base_kind = kind_of(base)
    override_kind = kind_of(override)

    if base_kind is not override_kind or override_kind is NodeKind.LEAF:
        if base_kind is not NodeKind.LEAF and override_kind is not NodeKind.LEAF:
            logger.debug(
                "Kind conflict in merge: %s replaced by %s",
                base_kind.name.lower(), override_kind.name.lower(),
            )
        return clone_if_possible(override)

    if override_kind is NodeKind.SEQUENCE:
        return [*base, *(clone_if_possible(item) for item in override)]

    return _merge_mappings(base, override)


def _merge_mappings(base, override) -> dict:
    merged = {key: clone_if_possible(value) for key, value in base.items()}

    for key, value in override.items():
        if is_cloneable(value):
            merged[key] = deep_merge(base.get(key), value)
        else:
            merged[key] = value

    return merged
