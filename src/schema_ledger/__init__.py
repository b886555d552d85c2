"""
Schema Ledger - API schema history and change reports

Records every captured version of a project's remote API schema and explains,
module by module and base type by base type, what changed between captures.
"""

__version__ = "0.1.0"

from .api import Ledger, open_ledger
from .diff import SnapshotDiff, diff_snapshots
from .snapshot import DataSourceSnapshot
from .store import ManifestRegistry, ProjectIdentity, SnapshotStore

__all__ = [
    "Ledger",
    "open_ledger",  # Main entry point
    "DataSourceSnapshot",
    "ManifestRegistry",
    "ProjectIdentity",
    "SnapshotDiff",
    "SnapshotStore",
    "diff_snapshots",
]
