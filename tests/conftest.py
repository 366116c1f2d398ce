"""Shared fixtures: one sample per diff variant and a counting engine double."""

from __future__ import annotations

from typing import Any

import pytest

from diffai.core.options import DiffOptions, OutputFormat
from diffai.core.results import (
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
    TensorStats,
    TensorStatsChanged,
    TypeChanged,
    WeightSignificantChange,
)
from diffai.engine.base import DiffEngine, EngineError

OLD_STATS = TensorStats(
    mean=0.5, std=0.1, min=0.0, max=1.0, shape=(2, 3), dtype="float32", element_count=6
)
NEW_STATS = TensorStats(
    mean=0.7, std=0.2, min=-1.0, max=2.0, shape=(2, 3), dtype="float32", element_count=6
)


def make_samples() -> dict[str, DiffResult]:
    return {
        "Added": Added("b", 5),
        "Removed": Removed("c", {"x": [1, None]}),
        "Modified": Modified("a", 1, 2),
        "TypeChanged": TypeChanged("t", "1", 1),
        "TensorShapeChanged": TensorShapeChanged("w", (2, 3), (2, 4)),
        "TensorStatsChanged": TensorStatsChanged("w", OLD_STATS, NEW_STATS),
        "TensorDataChanged": TensorDataChanged("w", 0.25, -0.5),
        "ModelArchitectureChanged": ModelArchitectureChanged("arch", "resnet50", "vit"),
        "WeightSignificantChange": WeightSignificantChange("fc.weight", 0.42),
        "ActivationFunctionChanged": ActivationFunctionChanged("act", "relu", "gelu"),
        "LearningRateChanged": LearningRateChanged("lr", 0.001, 0.0005),
        "OptimizerChanged": OptimizerChanged("optimizer", "sgd", "adam"),
        "LossChange": LossChange("loss", 0.5, 0.3),
        "AccuracyChange": AccuracyChange("accuracy", 0.8, 0.9),
        "ModelVersionChanged": ModelVersionChanged("version", "1.0", "1.1"),
    }


@pytest.fixture
def samples() -> dict[str, DiffResult]:
    return make_samples()


class CountingEngine(DiffEngine):
    """Engine double that records calls and returns canned results."""

    name = "counting"

    def __init__(self, results: list[DiffResult] | None = None, fail: str | None = None) -> None:
        self.results = results or []
        self.fail = fail
        self.calls: list[tuple[str, Any]] = []

    def compute_diff(self, old: Any, new: Any, options: DiffOptions | None = None) -> list[DiffResult]:
        self.calls.append(("compute_diff", options))
        if self.fail:
            raise EngineError(self.fail)
        return list(self.results)

    def compute_diff_paths(
        self, old_path: str, new_path: str, options: DiffOptions | None = None
    ) -> list[DiffResult]:
        self.calls.append(("compute_diff_paths", options))
        if self.fail:
            raise EngineError(self.fail)
        return list(self.results)

    def format(self, results: Any, output_format: OutputFormat) -> str:
        self.calls.append(("format", output_format))
        if self.fail:
            raise EngineError(self.fail)
        return f"{output_format.value}:{len(results)}"


@pytest.fixture
def counting_engine() -> CountingEngine:
    return CountingEngine()


@pytest.fixture
def engine_factory() -> type[CountingEngine]:
    return CountingEngine
