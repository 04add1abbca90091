"""Equality strategies for dirty-checking.

Two ways to decide whether a watched value changed:

- reference: identity, except for immutable scalars (numbers, strings,
  bytes, None), which compare by value when they share a type. NaN equals
  itself; a NaN-valued watch would otherwise never converge. Assigning a
  new but equal list is a change under this strategy; mutating the same
  list in place is not.
- value: structural comparison of mappings, sequences, sets and object
  fields (``__dict__`` or ``__slots__``), falling back to same-type ``==``
  at the leaves. Paired with ``snapshot()`` so that in-place mutation of a
  watched structure is detected.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Mapping, Sequence, Set
from typing import Any

# Initial last_value of every watcher. Compares unequal to everything,
# including None, so the first pass always fires.
_UNSET = object()

_STRINGS = (str, bytes, bytearray)

# bool is an int subclass; the type check in _reference_equal keeps 1 != True.
_SCALARS = (int, float, complex, str, bytes, type(None))


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _reference_equal(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if _is_nan(a) and _is_nan(b):
        return True
    return type(a) is type(b) and isinstance(a, _SCALARS) and bool(a == b)


def _fields(obj: Any) -> dict[str, Any] | None:
    """Instance attributes of a plain object, or None if it has none."""
    fields = dict(getattr(obj, "__dict__", None) or {})
    for klass in type(obj).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if hasattr(obj, name):
                fields[name] = getattr(obj, name)
    if not fields and not hasattr(obj, "__dict__"):
        return None
    return fields


def _structural_equal(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if a is _UNSET or b is _UNSET:
        return False

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(_structural_equal(a[key], b[key]) for key in a)

    if (
        isinstance(a, Sequence)
        and isinstance(b, Sequence)
        and not isinstance(a, _STRINGS)
        and not isinstance(b, _STRINGS)
    ):
        # list vs tuple is a change, list vs list subclass is not
        if isinstance(a, tuple) != isinstance(b, tuple):
            return False
        if len(a) != len(b):
            return False
        return all(_structural_equal(x, y) for x, y in zip(a, b))

    if isinstance(a, Set) and isinstance(b, Set):
        return a == b

    if _reference_equal(a, b):
        return True
    if type(a) is not type(b):
        return False

    fields_a, fields_b = _fields(a), _fields(b)
    if fields_a is not None and fields_b is not None:
        return _structural_equal(fields_a, fields_b)

    # Leaf objects without fields (datetime, Decimal, ...) define their own ==.
    return bool(a == b)


def are_equal(a: Any, b: Any, by_value: bool = False) -> bool:
    """Compare a watcher's new value against its last one."""
    if by_value:
        return _structural_equal(a, b)
    return _reference_equal(a, b)


def snapshot(value: Any) -> Any:
    """Deep copy stored as last_value under the value strategy."""
    return copy.deepcopy(value)
