"""diffai public Python API.

Provides the boundary entrypoints:
  - ``diff(old, new, options)`` → list of ``WireRecord``
  - ``diff_paths(old_path, new_path, options)`` → list of ``WireRecord``
  - ``format_output(records, format_name)`` → str

Each call translates host options, delegates to an engine, and converts the
engine's results.  Nothing is retried and nothing is returned partially.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from diffai.core.decoder import decode_records
from diffai.core.encoder import encode_results
from diffai.core.options import HostOptions, OutputFormat, build_diff_options
from diffai.core.wire import WireRecord, records_to_dicts
from diffai.engine.base import DiffEngine, EngineError, get_engine
from diffai.errors import ComputationFailure, InvalidConfiguration

logger = logging.getLogger("diffai")

OptionsLike = HostOptions | Mapping[str, Any] | None


def diff(
    old: Any,
    new: Any,
    options: OptionsLike = None,
    *,
    engine: DiffEngine | None = None,
) -> list[WireRecord]:
    """Compare two values and return one wire record per difference.

    Parameters:
        old: Old value (generic value, or a structure holding numpy arrays).
        new: New value.
        options: Host options (dict with snake_case or camelCase keys, or
            ``HostOptions``).
        engine: Engine to use; defaults to ``get_engine()``.

    Returns:
        Wire records in the engine's emission order.

    Raises:
        InvalidConfiguration: Options could not be translated.
        ComputationFailure: The engine failed.
    """
    diff_options = build_diff_options(options)
    engine = engine or get_engine()

    try:
        results = engine.compute_diff(old, new, diff_options)
    except EngineError as exc:
        raise ComputationFailure(f"Diff error: {exc}") from exc

    logger.debug("diff: %d result(s) from %s", len(results), type(engine).__name__)
    return encode_results(results)


def diff_paths(
    old_path: str,
    new_path: str,
    options: OptionsLike = None,
    *,
    engine: DiffEngine | None = None,
) -> list[WireRecord]:
    """Compare two files or directories and return wire records."""
    diff_options = build_diff_options(options)
    engine = engine or get_engine()

    try:
        results = engine.compute_diff_paths(str(old_path), str(new_path), diff_options)
    except EngineError as exc:
        raise ComputationFailure(f"Diff error: {exc}") from exc

    logger.debug("diff_paths %s vs %s: %d result(s)", old_path, new_path, len(results))
    return encode_results(results)


def format_output(
    records: Iterable[WireRecord | Mapping[str, Any]],
    format_name: str,
    *,
    engine: DiffEngine | None = None,
) -> str:
    """Decode wire records and render them with the engine's formatter.

    Every record is decoded before the format name is looked at; a single
    malformed or undecodable record fails the whole call.

    Raises:
        ValidationFailure: A record is missing a required field.
        UnsupportedVariant: A record's tag cannot be decoded.
        InvalidConfiguration: *format_name* is not a supported format.
        ComputationFailure: The formatter failed.
    """
    results = decode_records(records)

    try:
        output_format = OutputFormat.parse(format_name)
    except ValueError as exc:
        raise InvalidConfiguration(f"Invalid format: {exc}") from exc

    engine = engine or get_engine()
    try:
        return engine.format(results, output_format)
    except EngineError as exc:
        raise ComputationFailure(f"Format error: {exc}") from exc


def render_diff_paths(
    old_path: str,
    new_path: str,
    format_name: str,
    options: OptionsLike = None,
    *,
    engine: DiffEngine | None = None,
) -> str:
    """Diff two paths and render the engine results directly.

    Unlike ``format_output(diff_paths(...))`` this never round-trips through
    wire records, so encode-only variants (tensor statistics, model
    metadata strings) render too.
    """
    diff_options = build_diff_options(options)
    try:
        output_format = OutputFormat.parse(format_name)
    except ValueError as exc:
        raise InvalidConfiguration(f"Invalid format: {exc}") from exc

    engine = engine or get_engine()
    try:
        results = engine.compute_diff_paths(str(old_path), str(new_path), diff_options)
    except EngineError as exc:
        raise ComputationFailure(f"Diff error: {exc}") from exc
    try:
        return engine.format(results, output_format)
    except EngineError as exc:
        raise ComputationFailure(f"Format error: {exc}") from exc


def diff_records_to_dicts(records: list[WireRecord]) -> list[dict[str, Any]]:
    """Plain-dict form of wire records, absent fields omitted."""
    return records_to_dicts(records)
