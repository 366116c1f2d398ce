"""Numeric projection between engine-native and boundary integer widths.

Engine sizes (tensor dimensions, element counts) are unbounded Python ints;
the wire record carries them as unsigned 32-bit integers.  Narrowing is
explicit and governed by a ``NarrowingPolicy``.  Floats are never narrowed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

import numpy as np

from diffai.core.results import TensorStats
from diffai.core.wire import WireTensorStats
from diffai.errors import NumericOverflow

U32_MAX: int = int(np.iinfo(np.uint32).max)


class NarrowingPolicy(str, Enum):
    """How out-of-range values are handled when narrowing to u32."""

    CHECKED = "checked"
    SATURATE = "saturate"
    WRAP = "wrap"


def narrow_u32(value: int, policy: NarrowingPolicy = NarrowingPolicy.CHECKED) -> int:
    """Narrow a non-negative engine integer to the u32 range.

    ``WRAP`` reproduces a truncating cast (``value mod 2**32``) and exists only
    for callers that depended on that behaviour.  Negative values are never
    valid sizes and fail under every policy.
    """
    value = int(value)
    if value < 0:
        raise NumericOverflow(value)
    if value <= U32_MAX:
        return value
    if policy is NarrowingPolicy.SATURATE:
        return U32_MAX
    if policy is NarrowingPolicy.WRAP:
        return value & U32_MAX
    raise NumericOverflow(value)


def narrow_shape(
    shape: Iterable[int],
    policy: NarrowingPolicy = NarrowingPolicy.CHECKED,
) -> list[int]:
    return [narrow_u32(dim, policy) for dim in shape]


def widen_shape(shape: Sequence[int]) -> tuple[int, ...]:
    """Widen boundary u32 dimensions back to engine ints (always succeeds)."""
    return tuple(int(dim) for dim in shape)


def project_stats(
    stats: TensorStats,
    policy: NarrowingPolicy = NarrowingPolicy.CHECKED,
) -> WireTensorStats:
    return WireTensorStats(
        mean=float(stats.mean),
        std=float(stats.std),
        min=float(stats.min),
        max=float(stats.max),
        shape=narrow_shape(stats.shape, policy),
        dtype=stats.dtype,
        element_count=narrow_u32(stats.element_count, policy),
    )
