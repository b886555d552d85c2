"""Main callback: global options shared by every subcommand."""

from pathlib import Path
from typing import Optional

import typer

from ..logging_config import setup_logging
from . import app
from ._common import console


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        "-r",
        help="Ledger root directory (default: ~/.schema-ledger)",
        file_okay=False,
        dir_okay=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Record API schema snapshots per project and report what changed between them.

    [bold cyan]Examples:[/bold cyan]

      schema-ledger record api.json --origin http://api.example.com/schema.json

      schema-ledger report --origin http://api.example.com/schema.json

      schema-ledger diff old.json new.json --json
    """
    ctx.ensure_object(dict)
    ctx.obj["root"] = str(root) if root is not None else None
    ctx.obj["config"] = config

    if version:
        from .. import __version__

        console.print(f"[bold cyan]Schema Ledger[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    setup_logging(
        verbose=verbose,
        quiet=quiet,
        log_file=str(log_file) if log_file is not None else None,
    )
