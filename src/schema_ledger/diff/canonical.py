"""Canonical form of schema entities: context stripping and structural equality.

Entities are plain JSON values. The reserved context key carries snapshot-local
bookkeeping and is removed at every nesting level before two values are
compared, so equality depends on semantic content only.
"""

from typing import Any

CONTEXT_KEY = "context"


def strip_context(value: Any, key: str = CONTEXT_KEY) -> Any:
    """Return a copy of ``value`` with ``key`` removed from every mapping.

    Sequences are processed element-wise and mappings key-wise. Scalars are
    returned unchanged.
    """
    if isinstance(value, dict):
        return {k: strip_context(v, key) for k, v in value.items() if k != key}
    if isinstance(value, (list, tuple)):
        return [strip_context(item, key) for item in value]
    return value


def _tag(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "sequence"
    if isinstance(value, dict):
        return "mapping"
    return type(value).__name__


def _equal(a: Any, b: Any) -> bool:
    tag = _tag(a)
    if tag != _tag(b):
        return False
    if tag == "sequence":
        return len(a) == len(b) and all(_equal(x, y) for x, y in zip(a, b))
    if tag == "mapping":
        return a.keys() == b.keys() and all(_equal(a[k], b[k]) for k in a)
    return a == b


def deep_equal(a: Any, b: Any, key: str = CONTEXT_KEY) -> bool:
    """Structural equality after stripping context fields.

    Unlike ``==``, booleans never equal numbers (``True`` vs ``1``); integers
    and floats compare by value as JSON numbers do. Mapping key order is
    irrelevant, sequence order is significant.
    """
    return _equal(strip_context(a, key), strip_context(b, key))
