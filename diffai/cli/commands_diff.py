"""CLI command for diffing files and directories."""

from __future__ import annotations

import json
import sys
from typing import Any

import click
from rich.console import Console

from diffai.core.options import OutputFormat
from diffai.core.schemas import OPTIONS_SCHEMA
from diffai.errors import DiffaiError

_err_console = Console(stderr=True)

_FORMAT_CHOICES = [f.value for f in OutputFormat]


def _collect_options(
    options_file: str | None,
    epsilon: float | None,
    array_id_key: str | None,
    ignore_keys_regex: str | None,
    path_filter: str | None,
) -> dict[str, Any] | None:
    """Merge an options file with per-flag overrides (flags win)."""
    from diffai.cli.validation import validate_json_file

    merged: dict[str, Any] = {}
    if options_file:
        merged.update(validate_json_file(options_file, OPTIONS_SCHEMA))
    flags = {
        "epsilon": epsilon,
        "array_id_key": array_id_key,
        "ignore_keys_regex": ignore_keys_regex,
        "path_filter": path_filter,
    }
    merged.update({k: v for k, v in flags.items() if v is not None})
    return merged or None


@click.command("diff")
@click.argument("old_path", type=click.Path(exists=True))
@click.argument("new_path", type=click.Path(exists=True))
@click.option("--epsilon", type=float, default=None,
              help="Tolerance for numeric comparison.")
@click.option("--array-id-key", type=str, default=None,
              help="Key identifying list elements across old/new.")
@click.option("--ignore-keys-regex", type=str, default=None,
              help="Skip mapping keys matching this regex.")
@click.option("--path-filter", type=str, default=None,
              help="Only report differences whose path contains this text.")
@click.option("--options", "options_file", type=click.Path(exists=True), default=None,
              help="JSON file with diff options (flags override it).")
@click.option("--format", "-f", "output_format", type=click.Choice(_FORMAT_CHOICES),
              default="diffai", help="Output format: diffai (default), json, or yaml.")
@click.option("--records", is_flag=True, default=False,
              help="Emit boundary wire records as JSON instead of formatted output.")
def diff_command(
    old_path: str,
    new_path: str,
    epsilon: float | None,
    array_id_key: str | None,
    ignore_keys_regex: str | None,
    path_filter: str | None,
    options_file: str | None,
    output_format: str,
    records: bool,
) -> None:
    """Compare two files or directories (.json, .yaml, .npy, .npz)."""
    from diffai.api import diff_paths, diff_records_to_dicts, render_diff_paths

    options = _collect_options(options_file, epsilon, array_id_key, ignore_keys_regex, path_filter)

    try:
        if records:
            wire = diff_paths(old_path, new_path, options)
            click.echo(json.dumps(diff_records_to_dicts(wire), indent=2, default=str))
            return
        text = render_diff_paths(old_path, new_path, output_format, options)
    except DiffaiError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    if output_format == OutputFormat.DIFFAI.value and not text:
        _err_console.print("[green]✓ No differences[/green]")
        return
    click.echo(text)
