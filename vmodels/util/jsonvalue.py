"""Structural equality over JSON values (null/bool/number/string/array/object)."""

from typing import Any


def json_equals(a: Any, b: Any) -> bool:
    """Deep structural equality with JSON semantics.

    Booleans never equal numbers (``True != 1``), while integers and floats
    compare numerically (``1 == 1.0``). Tuples are treated as arrays.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(json_equals(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(json_equals(a[k], b[k]) for k in a)
    return False
