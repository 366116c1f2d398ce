"""Engine subpackage — diff computation and formatting behind ``DiffEngine``."""

from __future__ import annotations

__all__ = [
    "DiffEngine",
    "EngineError",
    "StructuralEngine",
    "get_engine",
    "register_engine",
]

from diffai.engine.base import DiffEngine, EngineError, get_engine, register_engine
from diffai.engine.structural import StructuralEngine
