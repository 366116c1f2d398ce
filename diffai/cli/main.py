"""diffai CLI — main entry point.

Usage::

    diffai diff old.json new.json --epsilon 1e-6 --format json
    diffai diff checkpoints/a checkpoints/b --records > records.json
    diffai format records.json --format yaml
"""

from __future__ import annotations

import logging

import click

from diffai.cli.commands_diff import diff_command
from diffai.cli.commands_format import format_command


@click.group()
@click.version_option(package_name="diffai")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """diffai — AI/ML-aware structural diff."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


cli.add_command(diff_command)
cli.add_command(format_command)

if __name__ == "__main__":
    cli()
