"""Base engine interface.

An engine computes diff results and renders them.  The boundary only talks
to engines through ``DiffEngine``, so any implementation (the built-in
structural engine, a native extension, a test double) can be swapped in.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Sequence
from typing import Any

from diffai.core.options import DiffOptions, OutputFormat
from diffai.core.results import DiffResult

logger = logging.getLogger("diffai.engine")


class EngineError(Exception):
    """Failure reported by an engine while diffing or formatting."""


class DiffEngine(abc.ABC):
    """Abstract diff engine."""

    name: str = "abstract"

    @abc.abstractmethod
    def compute_diff(
        self,
        old: Any,
        new: Any,
        options: DiffOptions | None = None,
    ) -> list[DiffResult]:
        """Diff two in-memory values."""

    @abc.abstractmethod
    def compute_diff_paths(
        self,
        old_path: str,
        new_path: str,
        options: DiffOptions | None = None,
    ) -> list[DiffResult]:
        """Diff two files or directories."""

    @abc.abstractmethod
    def format(self, results: Sequence[DiffResult], output_format: OutputFormat) -> str:
        """Render results in *output_format*."""


# ------------------------------------------------------------------
# Engine registry
# ------------------------------------------------------------------

_REGISTRY: dict[str, type[DiffEngine]] = {}


def register_engine(name: str, cls: type[DiffEngine]) -> None:
    """Register an engine class under *name*."""
    _REGISTRY[name] = cls


_ep_engines_discovered = False


def _discover_entry_point_engines() -> None:
    """Auto-discover engines registered via the ``diffai.engines`` entry-point group.

    Scans only once; subsequent calls are no-ops.
    """
    global _ep_engines_discovered
    if _ep_engines_discovered:
        return
    _ep_engines_discovered = True
    import importlib.metadata

    for ep in importlib.metadata.entry_points(group="diffai.engines"):
        try:
            cls = ep.load()
        except Exception:
            logger.warning("Failed to load engine entry-point %s", ep.name, exc_info=True)
            continue
        _REGISTRY.setdefault(ep.name, cls)


def get_engine(name: str = "default") -> DiffEngine:
    """Instantiate and return the engine registered under *name*.

    Resolution order:
    1. Explicit ``register_engine()`` calls.
    2. ``diffai.engines`` entry-point group (auto-discovered once).
    3. The built-in structural engine for ``"default"`` / ``"structural"``.
    """
    if name not in _REGISTRY:
        _discover_entry_point_engines()

    if name not in _REGISTRY:
        if name in ("default", "structural"):
            from diffai.engine.structural import StructuralEngine

            return StructuralEngine()
        raise KeyError(f"No engine registered for {name!r}. Available: {list(_REGISTRY)}")
    return _REGISTRY[name]()
