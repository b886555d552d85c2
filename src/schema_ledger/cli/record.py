"""Record and watch commands -- capture a data source file into the ledger."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import SchemaLedgerError
from ..refresh import RefreshResult
from . import app
from ._common import console, ledger_from_context, read_snapshot_file, resolve_identity
from ._diff_output import print_diff


def _print_result(result: RefreshResult) -> None:
    if result.diff is None:
        console.print(f"[green]Recorded first snapshot as {result.record.filename}[/green]")
        return
    print_diff(result.diff)
    if result.saved:
        console.print(f"[green]Recorded as {result.record.filename}[/green]")


@app.command()
def record(
    ctx: typer.Context,
    snapshot_file: Path = typer.Argument(
        ..., help="Data source JSON file", exists=True, dir_okay=False
    ),
    origin: str = typer.Option(..., "--origin", "-o", help="Schema origin URL of the project"),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
    no_validate: bool = typer.Option(
        False,
        "--no-validate",
        help="Accept module and base type names that are not portable",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Record a data source snapshot if it differs from the project's latest one.

    [bold cyan]Examples:[/bold cyan]

      schema-ledger record api.json --origin http://api.example.com/schema.json
    """
    ledger = ledger_from_context(ctx)
    identity = resolve_identity(project, origin)
    cycle = ledger.refresh_cycle(identity, lambda: read_snapshot_file(snapshot_file))
    if no_validate:
        cycle.validate = False

    try:
        result = cycle.run()
    except SchemaLedgerError as e:
        console.print(f"[red]Snapshot rejected:[/red] {e.message}")
        raise typer.Exit(1)

    if json_output:
        print(
            json.dumps(
                {
                    "saved": result.saved,
                    "record": result.record.to_dict() if result.record else None,
                    "diff": result.diff.to_dict() if result.diff else None,
                },
                indent=2,
                ensure_ascii=False,
            )
        )
    else:
        _print_result(result)


def _file_fetcher(path: Path):
    """Fetcher reading a data source file on every call; errors propagate to the poller."""

    def fetch() -> dict:
        return json.loads(path.read_text(encoding="utf-8"))

    return fetch


@app.command()
def watch(
    ctx: typer.Context,
    snapshot_file: Path = typer.Argument(..., help="Data source JSON file", dir_okay=False),
    origin: str = typer.Option(..., "--origin", "-o", help="Schema origin URL of the project"),
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
    interval: Optional[int] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between refreshes (default: polling_seconds from config)",
        min=1,
    ),
):
    """
    Re-read a data source file on an interval and record every change until Ctrl-C.
    """
    ledger = ledger_from_context(ctx)
    identity = resolve_identity(project, origin)

    poller = ledger.poller(identity, _file_fetcher(snapshot_file), on_result=_print_result)
    if interval is not None:
        poller.interval_seconds = interval

    console.print(
        f"[cyan]Watching {snapshot_file} every {poller.interval_seconds}s[/cyan] "
        "[dim](Ctrl-C to stop)[/dim]"
    )
    poller.start()
    try:
        while poller.is_running:
            poller.join(timeout=0.5)
    except KeyboardInterrupt:
        pass
    finally:
        poller.stop()
        console.print("[dim]Stopped.[/dim]")
