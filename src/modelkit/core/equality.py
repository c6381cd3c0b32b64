"""
Structural equality used by the ``equal`` and ``match`` validation rules.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def deep_equal(left: Any, right: Any) -> bool:
    """
    Compare two values structurally.

    - Two NaNs are equal.
    - Booleans never equal numbers (``True != 1``).
    - Lists and tuples compare element-wise, mappings by key set then values.
    - Cyclic structures terminate: a pair already being compared on the
      current branch is treated as equal.
    """
    return _deep_equal(left, right, set())


def _deep_equal(left: Any, right: Any, seen: set[tuple[int, int]]) -> bool:
    if left is right:
        return True

    if _is_nan(left) and _is_nan(right):
        return True

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return _compare_branch(left, right, seen, zip(left, right, strict=True))

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if set(left.keys()) != set(right.keys()):
            return False
        pairs = ((left[key], right[key]) for key in left)
        return _compare_branch(left, right, seen, pairs)

    if isinstance(left, (list, tuple, Mapping)) or isinstance(right, (list, tuple, Mapping)):
        return False

    try:
        return bool(left == right)
    except (TypeError, ValueError):
        return False


def _compare_branch(left: Any, right: Any, seen: set[tuple[int, int]], pairs: Any) -> bool:
    key = (id(left), id(right))
    if key in seen:
        return True
    seen.add(key)
    try:
        return all(_deep_equal(a, b, seen) for a, b in pairs)
    finally:
        # Only the current branch counts as "visited"
        seen.discard(key)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)
