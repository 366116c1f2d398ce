"""Rendering of diff results as diffai text, JSON or YAML."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any

import yaml

from diffai.core.options import OutputFormat
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
from diffai.engine.base import EngineError


def _v(value: Any) -> str:
    return json.dumps(value, default=str)


def _shape(shape: Sequence[int]) -> str:
    return "[" + ", ".join(str(d) for d in shape) + "]"


def _stats(s: TensorStats) -> str:
    return f"mean={s.mean:.4f}, std={s.std:.4f}, min={s.min:.4f}, max={s.max:.4f}"


_LINES: dict[type[DiffResult], Callable[[Any], str]] = {
    Added: lambda r: f"+ {r.path}: {_v(r.value)}",
    Removed: lambda r: f"- {r.path}: {_v(r.value)}",
    Modified: lambda r: f"~ {r.path}: {_v(r.old_value)} -> {_v(r.new_value)}",
    TypeChanged: lambda r: f"! {r.path}: type {_v(r.old_value)} -> {_v(r.new_value)}",
    TensorShapeChanged: lambda r: (
        f"~ {r.path}: tensor shape {_shape(r.old_shape)} -> {_shape(r.new_shape)}"
    ),
    TensorStatsChanged: lambda r: (
        f"~ {r.path}: tensor stats ({_stats(r.old_stats)}) -> ({_stats(r.new_stats)})"
    ),
    TensorDataChanged: lambda r: f"~ {r.path}: tensor mean {r.old_mean:.6g} -> {r.new_mean:.6g}",
    WeightSignificantChange: lambda r: f"! {r.path}: significant weight change {r.magnitude:.4f}",
    ModelArchitectureChanged: lambda r: f"~ {r.path}: architecture {r.old} -> {r.new}",
    ActivationFunctionChanged: lambda r: f"~ {r.path}: activation {r.old} -> {r.new}",
    OptimizerChanged: lambda r: f"~ {r.path}: optimizer {r.old} -> {r.new}",
    ModelVersionChanged: lambda r: f"~ {r.path}: model version {r.old} -> {r.new}",
    LearningRateChanged: lambda r: f"~ {r.path}: learning rate {r.old:g} -> {r.new:g}",
    LossChange: lambda r: f"~ {r.path}: loss {r.old:g} -> {r.new:g}",
    AccuracyChange: lambda r: f"~ {r.path}: accuracy {r.old:g} -> {r.new:g}",
}


def format_text(results: Sequence[DiffResult]) -> str:
    lines = []
    for r in results:
        render = _LINES.get(type(r))
        if render is None:
            raise EngineError(f"Cannot render {type(r).__name__}")
        lines.append(render(r))
    return "\n".join(lines)


def format_results(results: Sequence[DiffResult], output_format: OutputFormat) -> str:
    """Render *results* in *output_format*."""
    tagged = [r.to_tagged() for r in results]
    if output_format is OutputFormat.JSON:
        return json.dumps(tagged, indent=2, default=str)
    if output_format is OutputFormat.YAML:
        return yaml.safe_dump(tagged, sort_keys=False, allow_unicode=True)
    if output_format is OutputFormat.DIFFAI:
        return format_text(results)
    raise EngineError(f"Unsupported output format: {output_format}")
