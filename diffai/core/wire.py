"""Flat wire record exchanged across the boundary.

A ``WireRecord`` carries one diff result as a tag (``diff_type``) plus the
union of every variant's payload fields, all optional.  Records produced by
the encoder set exactly the fields of their tag; records arriving from a
host may be arbitrary and are validated by the decoder.

Absence is ``None`` for every optional field except the three generic-value
fields (``old_value``, ``new_value``, ``value``).  There ``None`` is a
legitimate JSON ``null`` payload, so absence is the ``ABSENT`` sentinel.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from diffai.core.schemas import WIRE_RECORD_SCHEMA, schema_errors
from diffai.errors import ValidationFailure


class _Absent:
    """Marker for a generic-value field that is not present."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()

GENERIC_VALUE_FIELDS = ("old_value", "new_value", "value")

#: camelCase spellings accepted from JavaScript-style hosts.
_CAMEL_KEYS: dict[str, str] = {
    "diffType": "diff_type",
    "oldValue": "old_value",
    "newValue": "new_value",
    "oldShape": "old_shape",
    "newShape": "new_shape",
    "oldStats": "old_stats",
    "newStats": "new_stats",
    "oldMean": "old_mean",
    "newMean": "new_mean",
    "changeMagnitude": "change_magnitude",
    "oldString": "old_string",
    "newString": "new_string",
    "oldFloat": "old_float",
    "newFloat": "new_float",
    "elementCount": "element_count",
}


def snake_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite known camelCase keys to snake_case; other keys pass through."""
    return {_CAMEL_KEYS.get(k, k): v for k, v in data.items()}


@dataclass
class WireTensorStats:
    """Tensor statistics with sizes projected to u32."""

    mean: float
    std: float
    min: float
    max: float
    shape: list[int]
    dtype: str
    element_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "mean": self.mean,
            "std": self.std,
            "min": self.min,
            "max": self.max,
            "shape": list(self.shape),
            "dtype": self.dtype,
            "element_count": self.element_count,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> WireTensorStats:
        d = snake_keys(d)
        return cls(
            mean=float(d["mean"]),
            std=float(d["std"]),
            min=float(d["min"]),
            max=float(d["max"]),
            shape=[int(s) for s in d["shape"]],
            dtype=str(d["dtype"]),
            element_count=int(d["element_count"]),
        )


@dataclass
class WireRecord:
    """Flat, all-optional boundary record for one diff result."""

    diff_type: str
    path: str
    old_value: Any = ABSENT
    new_value: Any = ABSENT
    value: Any = ABSENT
    old_shape: list[int] | None = None
    new_shape: list[int] | None = None
    old_stats: WireTensorStats | None = None
    new_stats: WireTensorStats | None = None
    old_mean: float | None = None
    new_mean: float | None = None
    change_magnitude: float | None = None
    old_string: str | None = None
    new_string: str | None = None
    old_float: float | None = None
    new_float: float | None = None

    def has(self, name: str) -> bool:
        """Whether payload field *name* is present."""
        current = getattr(self, name)
        if name in GENERIC_VALUE_FIELDS:
            return current is not ABSENT
        return current is not None

    def present_fields(self) -> list[str]:
        """Names of the payload fields that are set, in declaration order."""
        return [f.name for f in fields(self) if f.name not in _FIXED_FIELDS and self.has(f.name)]

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with absent fields omitted."""
        out: dict[str, Any] = {"diff_type": self.diff_type, "path": self.path}
        for name in self.present_fields():
            current = getattr(self, name)
            if isinstance(current, WireTensorStats):
                current = current.to_dict()
            elif name in ("old_shape", "new_shape"):
                current = list(current)
            out[name] = current
        return out

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> WireRecord:
        """Build a record from a host dict (snake_case or camelCase keys).

        Primitive field types are checked against ``WIRE_RECORD_SCHEMA``; a
        mismatch raises ``ValidationFailure``.  Field *presence* is not checked
        here, that is the decoder's job.
        """
        data = snake_keys(d)
        for name in ("old_stats", "new_stats"):
            if isinstance(data.get(name), Mapping):
                data[name] = snake_keys(data[name])
        errors = schema_errors(data, WIRE_RECORD_SCHEMA)
        if errors:
            tag = data.get("diff_type")
            raise ValidationFailure(
                tag if isinstance(tag, str) else "(unknown)",
                errors[0].split("]")[0].lstrip("["),
                "Malformed diff record: " + "; ".join(errors),
            )

        kwargs: dict[str, Any] = {}
        for name in GENERIC_VALUE_FIELDS:
            if name in data:
                kwargs[name] = data[name]
        for name in ("old_stats", "new_stats"):
            if data.get(name) is not None:
                kwargs[name] = WireTensorStats.from_dict(data[name])
        for name in ("old_shape", "new_shape"):
            if data.get(name) is not None:
                kwargs[name] = [int(s) for s in data[name]]
        for name in ("old_mean", "new_mean", "change_magnitude", "old_float", "new_float"):
            if data.get(name) is not None:
                kwargs[name] = float(data[name])
        for name in ("old_string", "new_string"):
            if data.get(name) is not None:
                kwargs[name] = data[name]

        return cls(diff_type=data["diff_type"], path=data["path"], **kwargs)


_FIXED_FIELDS = frozenset({"diff_type", "path"})


def records_to_dicts(records: list[WireRecord]) -> list[dict[str, Any]]:
    """Convert wire records to plain dicts for JSON hosts."""
    return [record.to_dict() for record in records]
