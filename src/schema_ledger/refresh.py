"""Refresh cycle (fetch, validate, diff, record) and the background poller that repeats it."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .diff.engine import diff_snapshots
from .diff.models import SnapshotDiff
from .logging_config import get_logger
from .snapshot.models import DataSourceSnapshot, as_snapshot
from .snapshot.validation import check_naming
from .store.models import ProjectIdentity, Record
from .store.registry import ManifestRegistry

logger = get_logger(__name__)

Fetcher = Callable[[], Any]

# Seconds stop() waits for an in-flight cycle before giving up on the thread
STOP_TIMEOUT_SECONDS = 10.0


@dataclass
class RefreshResult:
    """Outcome of one refresh cycle.

    ``diff`` is ``None`` when there was no earlier snapshot to compare with.
    ``record`` is ``None`` when nothing changed and nothing was saved.
    """

    snapshot: DataSourceSnapshot
    diff: Optional[SnapshotDiff]
    record: Optional[Record]

    @property
    def saved(self) -> bool:
        return self.record is not None


class RefreshCycle:
    """Fetch the current schema and record it if it differs from the latest one."""

    def __init__(
        self,
        registry: ManifestRegistry,
        identity: ProjectIdentity,
        fetcher: Fetcher,
        validate: bool = True,
        itemize_properties: bool = False,
        context_key: str = "context",
    ) -> None:
        self.registry = registry
        self.identity = identity
        self.fetcher = fetcher
        self.validate = validate
        self.itemize_properties = itemize_properties
        self.context_key = context_key

    def run(self) -> RefreshResult:
        """Run one cycle.

        Fetch errors propagate unchanged. A snapshot that breaks the naming
        policy raises ``SchemaNamingError`` before anything is persisted.
        """
        snapshot = as_snapshot(self.fetcher())
        if self.validate:
            check_naming(snapshot)

        previous = self.registry.get_latest(self.identity)
        if previous is None:
            record = self.registry.save_snapshot(self.identity, snapshot)
            logger.info("Recorded first snapshot for %s", self.identity.project_name)
            return RefreshResult(snapshot=snapshot, diff=None, record=record)

        diff = diff_snapshots(
            previous,
            snapshot,
            itemize_properties=self.itemize_properties,
            key=self.context_key,
        )
        if diff.is_empty:
            logger.debug("No schema changes for %s", self.identity.project_name)
            return RefreshResult(snapshot=snapshot, diff=diff, record=None)

        record = self.registry.save_snapshot(self.identity, snapshot)
        logger.info(
            "Recorded %s for %s: %d module change(s), %d base type change(s)",
            record.filename,
            self.identity.project_name,
            len(diff.mod_changes),
            len(diff.base_type_changes),
        )
        return RefreshResult(snapshot=snapshot, diff=diff, record=record)


class SnapshotPoller:
    """Runs a :class:`RefreshCycle` on a background thread every ``interval_seconds``.

    ``start()`` cancels any running schedule before starting a new one, and
    ``stop()`` guarantees no further fetch is scheduled once it returns.
    A failing cycle is logged and the schedule continues.
    """

    def __init__(
        self,
        cycle: RefreshCycle,
        interval_seconds: float,
        on_result: Optional[Callable[[RefreshResult], None]] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.cycle = cycle
        self.interval_seconds = interval_seconds
        self.on_result = on_result

        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, run_immediately: bool = True) -> None:
        """Start polling, replacing any schedule already running."""
        self.stop()
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._poll_loop,
            args=(stop_event, run_immediately),
            name="schema-ledger-poller",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Polling every %.1fs", self.interval_seconds)

    def stop(self) -> None:
        """Cancel the schedule and wait for an in-flight cycle to finish."""
        if self._stop_event is None:
            return
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=STOP_TIMEOUT_SECONDS)
            if thread.is_alive():
                logger.warning(
                    "Poller thread did not exit within %.0f seconds (refresh still running)",
                    STOP_TIMEOUT_SECONDS,
                )
        self._stop_event = None
        self._thread = None
        logger.debug("Polling stopped")

    def join(self, timeout: Optional[float] = None) -> None:
        """Block until the polling thread exits or ``timeout`` elapses."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout)

    def run_once(self) -> Optional[RefreshResult]:
        """Run a single cycle, logging instead of raising on failure."""
        try:
            result = self.cycle.run()
        except Exception:
            logger.exception("Refresh cycle failed")
            return None
        if self.on_result is not None:
            self.on_result(result)
        return result

    def _poll_loop(self, stop_event: threading.Event, run_immediately: bool) -> None:
        if run_immediately and not stop_event.is_set():
            self.run_once()
        while not stop_event.wait(self.interval_seconds):
            self.run_once()
