"""File and directory diffing for the structural engine."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import yaml

from diffai.core.options import DiffOptions
from diffai.core.results import Added, DiffResult, Removed
from diffai.core.values import to_value
from diffai.engine.base import EngineError

if TYPE_CHECKING:
    from diffai.engine.structural import StructuralEngine

logger = logging.getLogger("diffai.engine")

SUPPORTED_SUFFIXES = frozenset({".json", ".yaml", ".yml", ".npy", ".npz"})


def load_file(path: Path) -> Any:
    """Load a supported file into a value the engine can walk.

    ``.npy`` yields an ``ndarray``; ``.npz`` yields a dict of arrays keyed by
    member name.  Pickled object arrays are refused.
    """
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8"))
        if suffix == ".npy":
            return np.load(path, allow_pickle=False)
        if suffix == ".npz":
            with np.load(path, allow_pickle=False) as archive:
                return {name: archive[name] for name in archive.files}
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise EngineError(f"Failed to read {path}: {exc}") from exc
    raise EngineError(
        f"Unsupported file type '{suffix or path.name}'. "
        f"Supported: {', '.join(sorted(SUPPORTED_SUFFIXES))}"
    )


def _prefixed(prefix: str, result: DiffResult) -> DiffResult:
    path = f"{prefix}:{result.path}" if result.path else prefix
    return replace(result, path=path)


def _list_files(root: Path) -> dict[str, Path]:
    files: dict[str, Path] = {}
    for p in sorted(root.rglob("*")):
        if not p.is_file():
            continue
        if p.suffix.lower() not in SUPPORTED_SUFFIXES:
            logger.warning("Skipping unsupported file %s", p)
            continue
        files[p.relative_to(root).as_posix()] = p
    return files


def diff_paths(
    engine: StructuralEngine,
    old_path: str,
    new_path: str,
    options: DiffOptions | None = None,
) -> list[DiffResult]:
    """Diff two files, or two directories file by file."""
    old_p, new_p = Path(old_path), Path(new_path)
    for p in (old_p, new_p):
        if not p.exists():
            raise EngineError(f"Path does not exist: {p}")

    if old_p.is_file() and new_p.is_file():
        return engine.compute_diff(load_file(old_p), load_file(new_p), options)
    if not (old_p.is_dir() and new_p.is_dir()):
        raise EngineError(f"Cannot compare a file with a directory: {old_p} vs {new_p}")

    old_files, new_files = _list_files(old_p), _list_files(new_p)
    path_filter = options.path_filter if options else None
    results: list[DiffResult] = []
    for rel in sorted(set(old_files) | set(new_files)):
        if rel not in new_files:
            results.append(Removed(rel, _loaded_value(old_files[rel])))
        elif rel not in old_files:
            results.append(Added(rel, _loaded_value(new_files[rel])))
        else:
            file_results = engine.compute_diff(
                load_file(old_files[rel]), load_file(new_files[rel]), _without_filter(options)
            )
            results.extend(_prefixed(rel, r) for r in file_results)

    if path_filter:
        results = [r for r in results if path_filter in r.path]
    logger.debug("Directory diff %s vs %s: %d result(s)", old_p, new_p, len(results))
    return results


def _without_filter(options: DiffOptions | None) -> DiffOptions | None:
    # The filter applies to the prefixed paths, so it runs after prefixing.
    if options is None or options.path_filter is None:
        return options
    return replace(options, path_filter=None)


def _loaded_value(path: Path) -> Any:
    try:
        return to_value(load_file(path))
    except ValueError as exc:
        raise EngineError(f"Unsupported content in {path}: {exc}") from exc
