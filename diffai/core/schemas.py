"""JSON Schema definitions for host-supplied boundary documents.

Each schema is a Python dict following JSON Schema Draft 2020-12.
``schema_errors`` runs a validator and returns readable messages.
"""

from __future__ import annotations

from typing import Any

import jsonschema

_U32: dict[str, Any] = {"type": "integer", "minimum": 0, "maximum": 4294967295}

OPTIONS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "diffai Diff Options",
    "type": "object",
    "properties": {
        "epsilon": {"type": ["number", "null"]},
        "array_id_key": {"type": ["string", "null"]},
        "ignore_keys_regex": {"type": ["string", "null"]},
        "path_filter": {"type": ["string", "null"]},
        "output_format": {"type": ["string", "null"]},
    },
    "additionalProperties": False,
}

TENSOR_STATS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "diffai Wire Tensor Statistics",
    "type": "object",
    "required": ["mean", "std", "min", "max", "shape", "dtype", "element_count"],
    "properties": {
        "mean": {"type": "number"},
        "std": {"type": "number"},
        "min": {"type": "number"},
        "max": {"type": "number"},
        "shape": {"type": "array", "items": _U32},
        "dtype": {"type": "string"},
        "element_count": _U32,
    },
    "additionalProperties": True,
}

_NULLABLE_STATS: dict[str, Any] = {
    "oneOf": [{"type": "null"}, {k: v for k, v in TENSOR_STATS_SCHEMA.items() if k != "$schema"}],
}

WIRE_RECORD_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "diffai Wire Diff Record",
    "type": "object",
    "required": ["diff_type", "path"],
    "properties": {
        "diff_type": {"type": "string"},
        "path": {"type": "string"},
        # old_value / new_value / value are generic values: any JSON type.
        "old_shape": {"type": ["array", "null"], "items": _U32},
        "new_shape": {"type": ["array", "null"], "items": _U32},
        "old_stats": _NULLABLE_STATS,
        "new_stats": _NULLABLE_STATS,
        "old_mean": {"type": ["number", "null"]},
        "new_mean": {"type": ["number", "null"]},
        "change_magnitude": {"type": ["number", "null"]},
        "old_string": {"type": ["string", "null"]},
        "new_string": {"type": ["string", "null"]},
        "old_float": {"type": ["number", "null"]},
        "new_float": {"type": ["number", "null"]},
    },
    "additionalProperties": True,
}

RECORD_LIST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "diffai Wire Diff Record List",
    "type": "array",
    "items": {"type": "object"},
}


def schema_errors(data: Any, schema: dict[str, Any], limit: int = 5) -> list[str]:
    """Validate *data* against *schema* and return up to *limit* messages."""
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))

    msgs: list[str] = []
    for err in errors[:limit]:
        path = ".".join(str(p) for p in err.absolute_path) or "(root)"
        msgs.append(f"[{path}] {err.message}")
    return msgs
