"""CLI command for rendering saved wire records."""

from __future__ import annotations

import sys

import click
from rich.console import Console

from diffai.core.options import OutputFormat
from diffai.core.schemas import RECORD_LIST_SCHEMA
from diffai.errors import DiffaiError

_err_console = Console(stderr=True)


@click.command("format")
@click.argument("records_file", type=click.Path(exists=True))
@click.option("--format", "-f", "output_format", type=str, default=OutputFormat.DIFFAI.value,
              help="Output format: diffai (default), json, or yaml.")
def format_command(records_file: str, output_format: str) -> None:
    """Render a JSON list of wire records (as written by ``diff --records``)."""
    from diffai.api import format_output
    from diffai.cli.validation import validate_json_file

    records = validate_json_file(records_file, RECORD_LIST_SCHEMA)

    try:
        text = format_output(records, output_format)
    except DiffaiError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    click.echo(text)
