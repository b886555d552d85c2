"""History commands -- list tracked projects and print a project's latest snapshot."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from . import app
from ._common import console, ledger_from_context, resolve_identity


@app.command()
def projects(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List every project in the manifest with its record count.
    """
    ledger = ledger_from_context(ctx)
    tracked = ledger.registry.list_projects()

    if json_output:
        print(json.dumps([p.to_dict() for p in tracked], indent=2, ensure_ascii=False))
        return

    if not tracked:
        console.print("[yellow]No projects recorded yet.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Tracked Projects", show_lines=False, pad_edge=True)
    table.add_column("Path", style="bold")
    table.add_column("Project", style="cyan")
    table.add_column("Origin", style="green")
    table.add_column("Records", justify="right")
    table.add_column("Last saved", style="dim")

    for p in tracked:
        last = p.latest_record
        table.add_row(
            p.project_path,
            p.project_name,
            p.origin_url,
            str(len(p.records)),
            last.save_time if last else "-",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def latest(
    ctx: typer.Context,
    origin: str = typer.Option(..., "--origin", "-o", help="Schema origin URL of the project"),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
):
    """
    Print the most recently recorded snapshot of a project as JSON.
    """
    ledger = ledger_from_context(ctx)
    snapshot = ledger.get_latest(resolve_identity(project, origin))
    if snapshot is None:
        console.print("[yellow]No snapshot recorded for this project.[/yellow]")
        raise typer.Exit(1)
    print(json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False))
