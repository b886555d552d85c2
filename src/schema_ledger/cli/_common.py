"""Shared CLI helpers."""

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

from ..api import Ledger, open_ledger
from ..exceptions import SchemaLedgerError
from ..snapshot.models import DataSourceSnapshot
from ..store.models import ProjectIdentity

console = Console()


def ledger_from_context(ctx: typer.Context) -> Ledger:
    """Build the Ledger from the global options stored by the main callback."""
    obj = ctx.obj or {}
    try:
        return open_ledger(config_file=obj.get("config"), root_dir=obj.get("root"))
    except SchemaLedgerError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)


def resolve_identity(project: Optional[Path], origin: str) -> ProjectIdentity:
    """Project identity from CLI options; the project defaults to the current directory."""
    target = project if project is not None else Path.cwd()
    return ProjectIdentity(str(target.resolve()), origin)


def read_snapshot_file(path: Path) -> DataSourceSnapshot:
    """Read a data source JSON file, exiting with a message if it is not usable."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Cannot read snapshot {path}:[/red] {e}")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print(f"[red]Snapshot {path} must be a JSON object[/red]")
        raise typer.Exit(1)
    return DataSourceSnapshot.from_dict(data)
