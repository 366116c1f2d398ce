"""diffai — marshalling boundary for an AI/ML-aware structural diff engine."""

from __future__ import annotations

__version__ = "0.1.0"

from diffai.api import diff, diff_paths, diff_records_to_dicts, format_output
from diffai.core.options import HostOptions, OutputFormat
from diffai.core.wire import WireRecord, WireTensorStats
from diffai.errors import (
    ComputationFailure,
    DiffaiError,
    InvalidConfiguration,
    NumericOverflow,
    UnsupportedVariant,
    ValidationFailure,
)

__all__ = [
    "__version__",
    "diff",
    "diff_paths",
    "format_output",
    "diff_records_to_dicts",
    "HostOptions",
    "OutputFormat",
    "WireRecord",
    "WireTensorStats",
    "DiffaiError",
    "InvalidConfiguration",
    "ComputationFailure",
    "NumericOverflow",
    "ValidationFailure",
    "UnsupportedVariant",
]
