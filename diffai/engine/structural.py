"""Built-in structural diff engine.

Walks two values in parallel and reports differences in a stable order:
mapping keys sorted, list elements by position (or by identity key when
``array_id_key`` is set).  Scalar changes under well-known ML keys are
classified into model-metadata variants; numeric ``numpy.ndarray`` leaves
are compared as tensors.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np

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
    TypeChanged,
)
from diffai.core.values import numbers_equal, to_value, value_kind
from diffai.engine.base import DiffEngine, EngineError
from diffai.engine.tensors import compare_tensors

logger = logging.getLogger("diffai.engine")

_FLOAT_KEYS: dict[str, type[DiffResult]] = {
    "learning_rate": LearningRateChanged,
    "lr": LearningRateChanged,
    "loss": LossChange,
    "accuracy": AccuracyChange,
    "acc": AccuracyChange,
}

_STRING_KEYS: dict[str, type[DiffResult]] = {
    "optimizer": OptimizerChanged,
    "activation": ActivationFunctionChanged,
    "architecture": ModelArchitectureChanged,
    "model_type": ModelArchitectureChanged,
    "model_version": ModelVersionChanged,
    "version": ModelVersionChanged,
}


def join_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def last_key(path: str) -> str:
    """Final mapping key of *path*, lower-cased (``""`` for list elements)."""
    tail = path.rsplit(".", 1)[-1]
    return "" if tail.endswith("]") else tail.lower()


def classify_scalar_change(path: str, old: Any, new: Any) -> DiffResult:
    """Pick the variant for a changed scalar of the same generic kind."""
    key = last_key(path)
    if value_kind(old) == "number":
        cls = _FLOAT_KEYS.get(key)
        if cls is None and key.endswith("_loss"):
            cls = LossChange
        if cls is None and key.endswith("_accuracy"):
            cls = AccuracyChange
        if cls is not None:
            return cls(path, float(old), float(new))
    if isinstance(old, str):
        cls = _STRING_KEYS.get(key)
        if cls is not None:
            return cls(path, old, new)
    return Modified(path, old, new)


def _is_numeric_array(obj: Any) -> bool:
    # Complex dtypes go through tolist() and are rejected as non-generic.
    if not isinstance(obj, np.ndarray) or np.issubdtype(obj.dtype, np.complexfloating):
        return False
    return np.issubdtype(obj.dtype, np.number) or np.issubdtype(obj.dtype, np.bool_)


def _generic(obj: Any, path: str) -> Any:
    """Fully coerce *obj* into a generic value for reporting."""
    try:
        return to_value(obj, path)
    except ValueError as exc:
        raise EngineError(str(exc)) from exc


def _shallow(obj: Any, path: str) -> Any:
    """Coerce the top level of *obj* only; containers keep their children."""
    if isinstance(obj, dict):
        bad = next((k for k in obj if not isinstance(k, str)), None)
        if bad is not None:
            raise EngineError(
                f"Mapping keys must be strings, got {type(bad).__name__} at {path or '(root)'}"
            )
        return obj
    if isinstance(obj, list):
        return obj
    if isinstance(obj, tuple):
        return list(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return _generic(obj, path)


class _Walker:
    """One diff traversal; holds the options for the duration of a call."""

    def __init__(self, options: DiffOptions | None) -> None:
        self.options = options or DiffOptions()
        self.results: list[DiffResult] = []

    def walk(self, path: str, old: Any, new: Any) -> None:
        if _is_numeric_array(old) and _is_numeric_array(new):
            self.results.extend(compare_tensors(path, old, new, self.options.epsilon))
            return
        old, new = _shallow(old, path), _shallow(new, path)

        kind = value_kind(old)
        if kind != value_kind(new):
            self.results.append(TypeChanged(path, _generic(old, path), _generic(new, path)))
        elif kind == "object":
            self._walk_mapping(path, old, new)
        elif kind == "array":
            self._walk_list(path, old, new)
        elif kind == "number":
            if not numbers_equal(old, new, self.options.epsilon):
                self.results.append(classify_scalar_change(path, old, new))
        elif old != new:
            self.results.append(classify_scalar_change(path, old, new))

    def _ignored(self, key: str) -> bool:
        pattern = self.options.ignore_keys_regex
        return pattern is not None and pattern.search(key) is not None

    def _walk_mapping(self, path: str, old: dict[str, Any], new: dict[str, Any]) -> None:
        for key in sorted(set(old) | set(new)):
            if self._ignored(key):
                continue
            child = join_path(path, key)
            if key not in new:
                self.results.append(Removed(child, _generic(old[key], child)))
            elif key not in old:
                self.results.append(Added(child, _generic(new[key], child)))
            else:
                self.walk(child, old[key], new[key])

    def _walk_list(self, path: str, old: list[Any], new: list[Any]) -> None:
        id_key = self.options.array_id_key
        if id_key:
            old_ids = _identities(old, id_key, path)
            new_ids = _identities(new, id_key, path)
            if old_ids is not None and new_ids is not None:
                self._walk_keyed_list(path, dict(zip(old_ids, old)), dict(zip(new_ids, new)), id_key)
                return
        for i in range(max(len(old), len(new))):
            child = f"{path}[{i}]"
            if i >= len(new):
                self.results.append(Removed(child, _generic(old[i], child)))
            elif i >= len(old):
                self.results.append(Added(child, _generic(new[i], child)))
            else:
                self.walk(child, old[i], new[i])

    def _walk_keyed_list(
        self,
        path: str,
        old_by_id: dict[tuple[str, Any], dict[str, Any]],
        new_by_id: dict[tuple[str, Any], dict[str, Any]],
        id_key: str,
    ) -> None:
        # Old order first, then ids that only exist on the new side.
        order = list(old_by_id) + [k for k in new_by_id if k not in old_by_id]
        for ident in order:
            child = f"{path}[{id_key}={_id_label(ident)}]"
            if ident not in new_by_id:
                self.results.append(Removed(child, _generic(old_by_id[ident], child)))
            elif ident not in old_by_id:
                self.results.append(Added(child, _generic(new_by_id[ident], child)))
            else:
                self.walk(child, old_by_id[ident], new_by_id[ident])


def _id_token(value: Any, path: str) -> tuple[str, Any]:
    """Hashable identity for an id value; ``1`` and ``"1"`` stay distinct."""
    generic = _generic(value, path)
    kind = value_kind(generic)
    if kind in ("array", "object"):
        return kind, repr(generic)
    return kind, generic


def _identities(items: list[Any], id_key: str, path: str) -> list[tuple[str, Any]] | None:
    """Identity tokens for *items*, or ``None`` if they cannot be aligned by *id_key*."""
    if not all(isinstance(item, dict) and id_key in item for item in items):
        return None
    tokens = [_id_token(item[id_key], path) for item in items]
    if len(set(tokens)) != len(tokens):
        logger.debug("Duplicate %r values at %s; comparing by position", id_key, path or "(root)")
        return None
    return tokens


def _id_label(ident: tuple[str, Any]) -> str:
    kind, value = ident
    return value if kind in ("string", "array", "object") else repr(value)


def filter_paths(results: list[DiffResult], path_filter: str | None) -> list[DiffResult]:
    if not path_filter:
        return results
    return [r for r in results if path_filter in r.path]


class StructuralEngine(DiffEngine):
    """Default pure-Python engine."""

    name = "structural"

    def compute_diff(
        self,
        old: Any,
        new: Any,
        options: DiffOptions | None = None,
    ) -> list[DiffResult]:
        walker = _Walker(options)
        walker.walk("", old, new)
        results = filter_paths(walker.results, walker.options.path_filter)
        logger.debug("Structural diff produced %d result(s)", len(results))
        return results

    def compute_diff_paths(
        self,
        old_path: str,
        new_path: str,
        options: DiffOptions | None = None,
    ) -> list[DiffResult]:
        from diffai.engine.paths import diff_paths

        return diff_paths(self, old_path, new_path, options)

    def format(self, results: Sequence[DiffResult], output_format: OutputFormat) -> str:
        from diffai.engine.formatter import format_results

        return format_results(results, output_format)
