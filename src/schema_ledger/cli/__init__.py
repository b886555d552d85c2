"""CLI entry point: the typer app and its subcommands."""

import typer

app = typer.Typer(
    name="schema-ledger",
    help="Schema Ledger - API schema history and change reports",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .main import main as _main_callback  # noqa: F401, E402
from .record import record as _record, watch as _watch  # noqa: F401, E402
from .history import projects as _projects, latest as _latest  # noqa: F401, E402
from .diff import diff_cmd as _diff_cmd, report as _report  # noqa: F401, E402
