"""
Logging configuration for Schema Ledger.

Console output goes to stderr through rich so that ``--json`` output on
stdout stays machine-readable. An optional plain-text log file receives the
same records, which is useful for long-running ``watch`` sessions.
"""

import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "schema_ledger"

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(verbose: bool, quiet: bool) -> int:
    # quiet wins over verbose
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def _build_handlers(verbose: bool, log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))
        handlers.append(file_handler)

    return handlers


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging for the command line.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Only report errors (takes precedence over ``verbose``)
        log_file: Optional file that also receives every record

    Returns:
        The configured ``schema_ledger`` logger
    """
    level = _resolve_level(verbose, quiet)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=_build_handlers(verbose, log_file),
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the ``schema_ledger`` namespace.

    Args:
        name: Module name (e.g., 'schema_ledger.store.registry').
              Names outside the namespace are prefixed with it.
              If None, returns the root schema_ledger logger.
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
