"""Diff result sum type.

Each detected difference is one instance of a concrete ``DiffResult``
subclass.  The set of subclasses is closed: ``ALL_VARIANTS`` lists every
case, and the encoder checks at import time that it handles each of them.

Attributes:
    path: Location of the difference inside the compared structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True)
class TensorStats:
    """Engine-native tensor statistics.

    ``shape`` entries and ``element_count`` are unbounded Python ints; they are
    only narrowed when crossing the boundary.
    """

    mean: float
    std: float
    min: float
    max: float
    shape: tuple[int, ...] = ()
    dtype: str = "float64"
    element_count: int = 0

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


@dataclass(frozen=True)
class DiffResult:
    """Base of the closed diff result hierarchy."""

    path: str

    #: Variant name used as the wire tag.
    kind: ClassVar[str] = ""

    def payload(self) -> tuple[Any, ...]:
        """Variant payload, without the path, in declaration order."""
        raise NotImplementedError

    def to_tagged(self) -> dict[str, list[Any]]:
        """Externally tagged form: ``{"Modified": [path, old, new]}``."""
        items: list[Any] = [self.path]
        for item in self.payload():
            if isinstance(item, TensorStats):
                items.append(item.to_dict())
            elif isinstance(item, tuple):
                items.append(list(item))
            else:
                items.append(item)
        return {self.kind: items}


# ----------------------------------------------------------------------
# Generic value changes
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class Added(DiffResult):
    value: Any = None
    kind: ClassVar[str] = "Added"

    def payload(self) -> tuple[Any, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Removed(DiffResult):
    value: Any = None
    kind: ClassVar[str] = "Removed"

    def payload(self) -> tuple[Any, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Modified(DiffResult):
    old_value: Any = None
    new_value: Any = None
    kind: ClassVar[str] = "Modified"

    def payload(self) -> tuple[Any, ...]:
        return (self.old_value, self.new_value)


@dataclass(frozen=True)
class TypeChanged(DiffResult):
    old_value: Any = None
    new_value: Any = None
    kind: ClassVar[str] = "TypeChanged"

    def payload(self) -> tuple[Any, ...]:
        return (self.old_value, self.new_value)


# ----------------------------------------------------------------------
# Tensor changes
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class TensorShapeChanged(DiffResult):
    old_shape: tuple[int, ...] = ()
    new_shape: tuple[int, ...] = ()
    kind: ClassVar[str] = "TensorShapeChanged"

    def __post_init__(self) -> None:
        # Accept any sequence; store tuples so instances stay hashable and comparable.
        object.__setattr__(self, "old_shape", tuple(self.old_shape))
        object.__setattr__(self, "new_shape", tuple(self.new_shape))

    def payload(self) -> tuple[Any, ...]:
        return (self.old_shape, self.new_shape)


@dataclass(frozen=True)
class TensorStatsChanged(DiffResult):
    old_stats: TensorStats | None = None
    new_stats: TensorStats | None = None
    kind: ClassVar[str] = "TensorStatsChanged"

    def payload(self) -> tuple[Any, ...]:
        return (self.old_stats, self.new_stats)


@dataclass(frozen=True)
class TensorDataChanged(DiffResult):
    old_mean: float = 0.0
    new_mean: float = 0.0
    kind: ClassVar[str] = "TensorDataChanged"

    def payload(self) -> tuple[Any, ...]:
        return (self.old_mean, self.new_mean)


@dataclass(frozen=True)
class WeightSignificantChange(DiffResult):
    magnitude: float = 0.0
    kind: ClassVar[str] = "WeightSignificantChange"

    def payload(self) -> tuple[Any, ...]:
        return (self.magnitude,)


# ----------------------------------------------------------------------
# Model metadata changes
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class _StringChange(DiffResult):
    old: str = ""
    new: str = ""

    def payload(self) -> tuple[Any, ...]:
        return (self.old, self.new)


@dataclass(frozen=True)
class _FloatChange(DiffResult):
    old: float = 0.0
    new: float = 0.0

    def payload(self) -> tuple[Any, ...]:
        return (self.old, self.new)


@dataclass(frozen=True)
class ModelArchitectureChanged(_StringChange):
    kind: ClassVar[str] = "ModelArchitectureChanged"


@dataclass(frozen=True)
class ActivationFunctionChanged(_StringChange):
    kind: ClassVar[str] = "ActivationFunctionChanged"


@dataclass(frozen=True)
class OptimizerChanged(_StringChange):
    kind: ClassVar[str] = "OptimizerChanged"


@dataclass(frozen=True)
class ModelVersionChanged(_StringChange):
    kind: ClassVar[str] = "ModelVersionChanged"


@dataclass(frozen=True)
class LearningRateChanged(_FloatChange):
    kind: ClassVar[str] = "LearningRateChanged"


@dataclass(frozen=True)
class LossChange(_FloatChange):
    kind: ClassVar[str] = "LossChange"


@dataclass(frozen=True)
class AccuracyChange(_FloatChange):
    kind: ClassVar[str] = "AccuracyChange"


ALL_VARIANTS: tuple[type[DiffResult], ...] = (
    Added,
    Removed,
    Modified,
    TypeChanged,
    TensorShapeChanged,
    TensorStatsChanged,
    TensorDataChanged,
    ModelArchitectureChanged,
    WeightSignificantChange,
    ActivationFunctionChanged,
    LearningRateChanged,
    OptimizerChanged,
    LossChange,
    AccuracyChange,
    ModelVersionChanged,
)
