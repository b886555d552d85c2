"""Diff and report commands: compare two snapshot files, or a project's whole history."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..diff.engine import diff_snapshots
from ..exceptions import ProjectNotFoundError
from . import app
from ._common import console, ledger_from_context, read_snapshot_file, resolve_identity
from ._diff_output import print_diff, print_report


@app.command(name="diff")
def diff_cmd(
    ctx: typer.Context,
    old: Path = typer.Argument(..., help="Earlier snapshot JSON file", exists=True, dir_okay=False),
    new: Path = typer.Argument(..., help="Later snapshot JSON file", exists=True, dir_okay=False),
    itemize: Optional[bool] = typer.Option(
        None,
        "--itemize/--no-itemize",
        help="One item per changed base type property",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
) -> None:
    """
    Show what changed between two snapshot files.

    [bold cyan]Examples:[/bold cyan]

      schema-ledger diff old.json new.json

      schema-ledger diff old.json new.json --json
    """
    ledger = ledger_from_context(ctx)
    previous = read_snapshot_file(old)
    following = read_snapshot_file(new)

    if itemize is None:
        diff = ledger.diff(previous, following)
    else:
        diff = diff_snapshots(
            previous, following, itemize_properties=itemize, key=ledger.config.context_key
        )

    if json_output:
        print(json.dumps(diff.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_diff(diff)


@app.command()
def report(
    ctx: typer.Context,
    origin: str = typer.Option(..., "--origin", "-o", help="Schema origin URL of the project"),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
) -> None:
    """
    Show every recorded change for a project, oldest first.

    [bold cyan]Examples:[/bold cyan]

      schema-ledger report --origin http://api.example.com/schema.json

      schema-ledger report -o http://api.example.com/schema.json --json
    """
    ledger = ledger_from_context(ctx)
    identity = resolve_identity(project, origin)

    try:
        data = ledger.report(identity)
    except ProjectNotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        console.print("[dim]Record a snapshot first with 'schema-ledger record'.[/dim]")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(data.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_report(data)
