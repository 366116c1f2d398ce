"""Generic host values.

A generic value is one of: ``None``, ``bool``, ``int``, ``float``, ``str``,
a ``list`` of generic values, or a ``dict`` mapping ``str`` keys to generic
values.  These are exactly the JSON-native builtins, so the engine, the
wire record and any JSON host agree on a single representation.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Union

import numpy as np

from diffai.errors import InvalidConfiguration

Value = Union[None, bool, int, float, str, list["Value"], dict[str, "Value"]]


def value_kind(value: Any) -> str:
    """Return the generic kind of *value*.

    ``bool`` is checked before ``int`` because ``True`` is an ``int`` in Python
    but a distinct case of the generic value type.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise InvalidConfiguration(f"Not a generic value: {type(value).__name__}")


def to_value(obj: Any, _path: str = "") -> Value:
    """Coerce host input into the generic value domain.

    Tuples become lists, numpy scalars and arrays become builtins.  Any other
    type (sets, bytes, arbitrary objects, non-string mapping keys) raises
    ``InvalidConfiguration`` naming the offending location.
    """
    if obj is None or isinstance(obj, (bool, str)):
        return obj
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, (int, np.integer)):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return to_value(obj.tolist(), _path)
    if isinstance(obj, (list, tuple)):
        return [to_value(item, f"{_path}[{i}]") for i, item in enumerate(obj)]
    if isinstance(obj, Mapping):
        out: dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise InvalidConfiguration(
                    f"Mapping keys must be strings, got {type(key).__name__} at {_path or '(root)'}"
                )
            out[key] = to_value(item, f"{_path}.{key}" if _path else key)
        return out
    raise InvalidConfiguration(
        f"Unsupported value type {type(obj).__name__} at {_path or '(root)'}"
    )


def numbers_equal(a: float, b: float, epsilon: float | None = None) -> bool:
    if a == b:
        return True
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    if epsilon is None:
        return False
    return abs(a - b) <= epsilon
