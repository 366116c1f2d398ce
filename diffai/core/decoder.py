"""Result decoder: ``WireRecord`` → ``DiffResult``.

Only ten tags can be decoded.  The encode-only tags (tensor statistics and
the string-valued model metadata changes) are rejected exactly like unknown
tags: rebuilding ``TensorStats`` from projected u32 sizes would not be
lossless, and no host currently sends those records back.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from diffai.core.numeric import widen_shape
from diffai.core.results import (
    AccuracyChange,
    Added,
    DiffResult,
    LearningRateChanged,
    LossChange,
    Modified,
    Removed,
    TensorDataChanged,
    TensorShapeChanged,
    TypeChanged,
    WeightSignificantChange,
)
from diffai.core.wire import WireRecord
from diffai.errors import UnsupportedVariant, ValidationFailure


def _require(record: WireRecord, name: str) -> Any:
    if not record.has(name):
        raise ValidationFailure(record.diff_type, name)
    return getattr(record, name)


def _decode_added(r: WireRecord) -> DiffResult:
    return Added(r.path, _require(r, "new_value"))


def _decode_removed(r: WireRecord) -> DiffResult:
    return Removed(r.path, _require(r, "value"))


def _decode_modified(r: WireRecord) -> DiffResult:
    return Modified(r.path, _require(r, "old_value"), _require(r, "new_value"))


def _decode_type_changed(r: WireRecord) -> DiffResult:
    return TypeChanged(r.path, _require(r, "old_value"), _require(r, "new_value"))


def _decode_shape(r: WireRecord) -> DiffResult:
    old_shape = widen_shape(_require(r, "old_shape"))
    new_shape = widen_shape(_require(r, "new_shape"))
    return TensorShapeChanged(r.path, old_shape, new_shape)


def _decode_data(r: WireRecord) -> DiffResult:
    return TensorDataChanged(r.path, _require(r, "old_mean"), _require(r, "new_mean"))


def _decode_weight(r: WireRecord) -> DiffResult:
    return WeightSignificantChange(r.path, _require(r, "change_magnitude"))


def _float_pair(cls: type[DiffResult]) -> Callable[[WireRecord], DiffResult]:
    def decode(r: WireRecord) -> DiffResult:
        return cls(r.path, _require(r, "old_float"), _require(r, "new_float"))

    return decode


_DECODERS: dict[str, Callable[[WireRecord], DiffResult]] = {
    "Added": _decode_added,
    "Removed": _decode_removed,
    "Modified": _decode_modified,
    "TypeChanged": _decode_type_changed,
    "TensorShapeChanged": _decode_shape,
    "TensorDataChanged": _decode_data,
    "WeightSignificantChange": _decode_weight,
    "LearningRateChanged": _float_pair(LearningRateChanged),
    "LossChange": _float_pair(LossChange),
    "AccuracyChange": _float_pair(AccuracyChange),
}

DECODABLE_TAGS: frozenset[str] = frozenset(_DECODERS)

ENCODE_ONLY_TAGS: frozenset[str] = frozenset({
    "TensorStatsChanged",
    "ModelArchitectureChanged",
    "ActivationFunctionChanged",
    "OptimizerChanged",
    "ModelVersionChanged",
})


def decode_record(record: WireRecord | Mapping[str, Any]) -> DiffResult:
    """Decode one wire record.

    Raises:
        ValidationFailure: A field required by the record's tag is absent,
            a dict record has wrongly-typed fields, or the record is neither
            a ``WireRecord`` nor a mapping.
        UnsupportedVariant: The tag is unknown or encode-only.
    """
    if not isinstance(record, WireRecord):
        if not isinstance(record, Mapping):
            raise ValidationFailure(
                "(unknown)",
                "diff_type",
                f"Malformed diff record: expected a mapping, got {type(record).__name__}",
            )
        record = WireRecord.from_dict(record)
    decoder = _DECODERS.get(record.diff_type)
    if decoder is None:
        raise UnsupportedVariant(record.diff_type)
    return decoder(record)


def decode_records(records: Iterable[WireRecord | Mapping[str, Any]]) -> list[DiffResult]:
    """Decode every record, failing on the first bad one."""
    return [decode_record(r) for r in records]
