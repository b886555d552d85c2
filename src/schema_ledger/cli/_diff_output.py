"""Rich rendering of snapshot diffs and history reports."""

from typing import List

from rich.table import Table

from ..diff.models import EntityChange, SnapshotDiff
from ..report.assembler import ReportData
from ._common import console

_STATUS_STYLE = {
    "modified": "yellow",
    "removed": "red",
    "added": "green",
}


def _print_changes(title: str, changes: List[EntityChange]) -> None:
    if not changes:
        return
    console.print(f"  [bold]{title}[/bold]")
    for change in changes:
        style = _STATUS_STYLE.get(change.status, "white")
        console.print(f"    [{style}]{change.status:<8}[/{style}] {change.name}")
        if change.status == "modified":
            for detail in change.details:
                console.print(f"      [dim]-[/dim] {detail}")


def print_diff(diff: SnapshotDiff) -> None:
    if diff.is_empty:
        console.print("[green]No schema changes.[/green]")
        return
    _print_changes("Modules", diff.mod_changes)
    _print_changes("Base types", diff.base_type_changes)


def print_report(data: ReportData) -> None:
    project = data.project
    table = Table(title="Recorded Snapshots", show_lines=False, pad_edge=True)
    table.add_column("#", style="bold", justify="right")
    table.add_column("Record", style="cyan")
    table.add_column("Saved", style="green")

    for index, record in enumerate(data.records):
        table.add_row(str(index), record.filename, record.save_time)

    console.print()
    console.print(f"[bold]{project.project_name}[/bold]  [dim]{project.origin_url}[/dim]")
    console.print(table)

    if not data.diffs:
        console.print("[yellow]Only one snapshot recorded; nothing to compare yet.[/yellow]")
        return

    for entry in data.diffs:
        console.print()
        console.print(f"[bold cyan]{entry.save_time}[/bold cyan]")
        if entry.is_empty:
            console.print("  [dim]no changes[/dim]")
            continue
        _print_changes("Modules", entry.mod_changes)
        _print_changes("Base types", entry.base_type_changes)
    console.print()
