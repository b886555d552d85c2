"""Public API for Schema Ledger.

A :class:`Ledger` is built once per process and handed to whatever needs
snapshot history. It owns the store root, the manifest registry and the
settings that shape diffs.

Example:
    >>> from schema_ledger import ProjectIdentity, open_ledger
    >>>
    >>> ledger = open_ledger(root_dir="/tmp/ledger")
    >>> shop = ProjectIdentity("/work/shop", "http://api.example.com/schema.json")
    >>> ledger.save_snapshot(shop, {"name": "shop", "mods": [], "baseClasses": []})
    >>> report = ledger.report(shop)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, Tuple

from .config import LedgerConfig, load_config
from .diff.engine import diff_snapshots
from .diff.models import SnapshotDiff
from .logging_config import get_logger
from .refresh import Fetcher, RefreshCycle, RefreshResult, SnapshotPoller
from .report.assembler import ReportData, build_report, latest_changes
from .snapshot.models import DataSourceSnapshot
from .store.models import ProjectIdentity, Record
from .store.registry import ManifestRegistry
from .store.snapshot_store import SnapshotStore

logger = get_logger(__name__)


class Ledger:
    """Snapshot history for every tracked project under one root directory."""

    def __init__(self, config: Optional[LedgerConfig] = None) -> None:
        self.config = config or LedgerConfig()
        self.store = SnapshotStore(self.config.root_path)
        self.registry = ManifestRegistry(self.store, self.config.manifest_filename)

    def save_snapshot(self, identity: ProjectIdentity, snapshot: Any) -> Record:
        return self.registry.save_snapshot(identity, snapshot)

    def get_latest(self, identity: ProjectIdentity) -> Optional[DataSourceSnapshot]:
        return self.registry.get_latest(identity)

    def diff(self, previous: Any, following: Any) -> SnapshotDiff:
        """Diff two snapshots with this ledger's settings."""
        return diff_snapshots(
            previous,
            following,
            itemize_properties=self.config.itemize_property_changes,
            key=self.config.context_key,
        )

    def report(self, identity: ProjectIdentity) -> ReportData:
        """Report data for ``identity``; raises ``ProjectNotFoundError`` if unknown."""
        return build_report(
            self.registry,
            identity,
            itemize_properties=self.config.itemize_property_changes,
            context_key=self.config.context_key,
        )

    def latest_changes(
        self, identity: ProjectIdentity
    ) -> Tuple[Optional[DataSourceSnapshot], Optional[SnapshotDiff]]:
        return latest_changes(
            self.registry,
            identity,
            itemize_properties=self.config.itemize_property_changes,
            context_key=self.config.context_key,
        )

    def refresh_cycle(self, identity: ProjectIdentity, fetcher: Fetcher) -> RefreshCycle:
        return RefreshCycle(
            self.registry,
            identity,
            fetcher,
            validate=self.config.validate_names,
            itemize_properties=self.config.itemize_property_changes,
            context_key=self.config.context_key,
        )

    def poller(
        self,
        identity: ProjectIdentity,
        fetcher: Fetcher,
        on_result: Optional[Callable[[RefreshResult], None]] = None,
    ) -> SnapshotPoller:
        """A poller (not yet started) refreshing every ``polling_seconds``."""
        return SnapshotPoller(
            self.refresh_cycle(identity, fetcher),
            self.config.polling_seconds,
            on_result=on_result,
        )


def open_ledger(config_file: Optional[Path] = None, **overrides: Any) -> Ledger:
    """Load configuration (auto-discovered TOML + overrides) and build a Ledger."""
    config = load_config(config_file=config_file, **overrides)
    logger.debug("Opening ledger at %s", config.root_path)
    return Ledger(config)
