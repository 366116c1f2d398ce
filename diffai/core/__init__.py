"""Core subpackage — result model, generic values, options, wire codec."""

from __future__ import annotations

__all__ = [
    "ABSENT",
    "DECODABLE_TAGS",
    "DiffOptions",
    "DiffResult",
    "ENCODE_ONLY_TAGS",
    "HostOptions",
    "NarrowingPolicy",
    "OutputFormat",
    "TensorStats",
    "WireRecord",
    "WireTensorStats",
    "build_diff_options",
    "decode_record",
    "decode_records",
    "encode_result",
    "encode_results",
]

from diffai.core.decoder import DECODABLE_TAGS, ENCODE_ONLY_TAGS, decode_record, decode_records
from diffai.core.encoder import encode_result, encode_results
from diffai.core.numeric import NarrowingPolicy
from diffai.core.options import DiffOptions, HostOptions, OutputFormat, build_diff_options
from diffai.core.results import DiffResult, TensorStats
from diffai.core.wire import ABSENT, WireRecord, WireTensorStats
