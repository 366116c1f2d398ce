"""Tensor comparison for ``numpy.ndarray`` leaves."""

from __future__ import annotations

import numpy as np

from diffai.core.results import (
    DiffResult,
    TensorDataChanged,
    TensorShapeChanged,
    TensorStats,
    TensorStatsChanged,
    WeightSignificantChange,
)

#: Relative L2 change at or above which a WeightSignificantChange is reported.
SIGNIFICANT_CHANGE_THRESHOLD: float = 0.05

_TINY = 1e-12


def tensor_stats(arr: np.ndarray) -> TensorStats:
    """Summary statistics of *arr*.  Empty arrays report zeros."""
    data = np.asarray(arr)
    if data.size == 0:
        mean = std = lo = hi = 0.0
    else:
        values = data.astype(np.float64)
        mean = float(np.mean(values))
        std = float(np.std(values))
        lo = float(np.min(values))
        hi = float(np.max(values))
    return TensorStats(
        mean=mean,
        std=std,
        min=lo,
        max=hi,
        shape=tuple(int(d) for d in data.shape),
        dtype=str(data.dtype),
        element_count=int(data.size),
    )


def change_magnitude(old: np.ndarray, new: np.ndarray) -> float:
    """Relative L2 norm of ``new - old`` against ``old``."""
    a = np.asarray(old, dtype=np.float64)
    b = np.asarray(new, dtype=np.float64)
    delta = float(np.linalg.norm(b - a))
    return delta / max(float(np.linalg.norm(a)), _TINY)


def _close(a: float, b: float, epsilon: float) -> bool:
    return abs(a - b) <= epsilon


def compare_tensors(
    path: str,
    old: np.ndarray,
    new: np.ndarray,
    epsilon: float | None = None,
) -> list[DiffResult]:
    """Compare two arrays at *path*.

    Shape mismatches short-circuit.  Equal-shaped arrays that are not
    all-close produce a statistics or mean change (neither for a pure
    permutation), followed by a significant-change marker when the relative
    change is large.
    """
    if old.shape != new.shape:
        return [TensorShapeChanged(path, tuple(old.shape), tuple(new.shape))]

    eps = epsilon or 0.0
    if old.size == 0 or np.allclose(
        old.astype(np.float64), new.astype(np.float64), rtol=0.0, atol=eps, equal_nan=True
    ):
        return []

    results: list[DiffResult] = []
    old_stats, new_stats = tensor_stats(old), tensor_stats(new)
    spread_moved = not (
        _close(old_stats.std, new_stats.std, eps)
        and _close(old_stats.min, new_stats.min, eps)
        and _close(old_stats.max, new_stats.max, eps)
    )
    if spread_moved:
        results.append(TensorStatsChanged(path, old_stats, new_stats))
    elif not _close(old_stats.mean, new_stats.mean, eps):
        results.append(TensorDataChanged(path, old_stats.mean, new_stats.mean))

    magnitude = change_magnitude(old, new)
    if magnitude >= SIGNIFICANT_CHANGE_THRESHOLD:
        results.append(WeightSignificantChange(path, magnitude))
    return results
