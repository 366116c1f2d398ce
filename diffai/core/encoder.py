"""Result encoder: ``DiffResult`` → ``WireRecord``.

Encoding is total over ``ALL_VARIANTS``.  Each variant has a small function
returning the payload fields for its tag; the record is built from those
alone, so every other field stays absent.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from diffai.core.numeric import NarrowingPolicy, narrow_shape, project_stats
from diffai.core.results import (
    ALL_VARIANTS,
    AccuracyChange,
    ActivationFunctionChanged,
    Added,
    DiffResult,
    LearningRateChanged,
    LossChange,
    ModelArchitectureChanged,
    ModelVersionChanged,
    Modified,
    OptimizerChanged,
    Removed,
    TensorDataChanged,
    TensorShapeChanged,
    TensorStatsChanged,
    TypeChanged,
    WeightSignificantChange,
)
from diffai.core.wire import WireRecord

_FieldsFn = Callable[[Any, NarrowingPolicy], dict[str, Any]]


def _generic_pair(r: Modified | TypeChanged, _policy: NarrowingPolicy) -> dict[str, Any]:
    return {"old_value": r.old_value, "new_value": r.new_value}


def _string_pair(r: Any, _policy: NarrowingPolicy) -> dict[str, Any]:
    return {"old_string": r.old, "new_string": r.new}


def _float_pair(r: Any, _policy: NarrowingPolicy) -> dict[str, Any]:
    return {"old_float": r.old, "new_float": r.new}


_ENCODERS: dict[type[DiffResult], _FieldsFn] = {
    Added: lambda r, _p: {"new_value": r.value},
    Removed: lambda r, _p: {"value": r.value},
    Modified: _generic_pair,
    TypeChanged: _generic_pair,
    TensorShapeChanged: lambda r, p: {
        "old_shape": narrow_shape(r.old_shape, p),
        "new_shape": narrow_shape(r.new_shape, p),
    },
    TensorStatsChanged: lambda r, p: {
        "old_stats": project_stats(r.old_stats, p),
        "new_stats": project_stats(r.new_stats, p),
    },
    TensorDataChanged: lambda r, _p: {"old_mean": r.old_mean, "new_mean": r.new_mean},
    ModelArchitectureChanged: _string_pair,
    WeightSignificantChange: lambda r, _p: {"change_magnitude": r.magnitude},
    ActivationFunctionChanged: _string_pair,
    LearningRateChanged: _float_pair,
    OptimizerChanged: _string_pair,
    LossChange: _float_pair,
    AccuracyChange: _float_pair,
    ModelVersionChanged: _string_pair,
}

_missing = [cls.kind for cls in ALL_VARIANTS if cls not in _ENCODERS]
if _missing:
    raise TypeError(f"No encoder for diff variants: {_missing}")


def encode_result(
    result: DiffResult,
    *,
    policy: NarrowingPolicy = NarrowingPolicy.CHECKED,
) -> WireRecord:
    """Encode one diff result into a wire record.

    Raises:
        TypeError: If *result* is not one of the known variants.
        NumericOverflow: If a shape or element count exceeds u32 under
            ``NarrowingPolicy.CHECKED``.
    """
    fields_fn = _ENCODERS.get(type(result))
    if fields_fn is None:
        raise TypeError(f"Not a diff result variant: {type(result).__name__}")
    return WireRecord(diff_type=result.kind, path=result.path, **fields_fn(result, policy))


def encode_results(
    results: Iterable[DiffResult],
    *,
    policy: NarrowingPolicy = NarrowingPolicy.CHECKED,
) -> list[WireRecord]:
    """Encode a sequence of results, preserving order."""
    return [encode_result(r, policy=policy) for r in results]
