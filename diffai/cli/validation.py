"""CLI input JSON loading and validation against diffai schemas."""

from __future__ import annotations

import json
from typing import Any

import click

from diffai.core.schemas import schema_errors


def validate_json_file(filepath: str, schema: dict[str, Any]) -> Any:
    """Load a JSON file and validate it against *schema*.

    Parameters:
        filepath: Path to the JSON file.
        schema: JSON Schema dict (e.g. ``OPTIONS_SCHEMA``).

    Returns:
        The parsed JSON data.

    Raises:
        click.ClickException: On parse or validation errors.
    """
    try:
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON in {filepath}: {exc}") from exc

    errors = schema_errors(data, schema)
    if errors:
        title = schema.get("title", "schema")
        summary = "\n".join(f"  {msg}" for msg in errors)
        full = f"Validation errors for {filepath} ({title}):\n{summary}"
        raise click.ClickException(full)

    return data
