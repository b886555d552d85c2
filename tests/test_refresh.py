"""Tests for the refresh cycle and the background poller."""

import copy
import threading
import time

import pytest

from schema_ledger.exceptions import SchemaNamingError
from schema_ledger.refresh import RefreshCycle, SnapshotPoller


class _Source:
    """Fetcher returning a scripted sequence of snapshots, repeating the last one."""

    def __init__(self, *snapshots):
        self.snapshots = list(snapshots)
        self.calls = 0
        self.lock = threading.Lock()

    def __call__(self):
        with self.lock:
            index = min(self.calls, len(self.snapshots) - 1)
            self.calls += 1
        value = self.snapshots[index]
        if isinstance(value, Exception):
            raise value
        return copy.deepcopy(value)


def _changed(petstore):
    changed = copy.deepcopy(petstore)
    changed["mods"][0]["description"] = "all user operations"
    return changed


class TestRefreshCycle:
    def test_first_cycle_saves_without_diff(self, registry, identity, petstore):
        result = RefreshCycle(registry, identity, _Source(petstore)).run()
        assert result.saved
        assert result.diff is None
        assert result.record.filename == "record_0"

    def test_unchanged_snapshot_is_not_saved(self, registry, identity, petstore):
        cycle = RefreshCycle(registry, identity, _Source(petstore))
        cycle.run()
        result = cycle.run()

        assert not result.saved
        assert result.diff.is_empty
        assert len(registry.find_project(identity).records) == 1

    def test_changed_snapshot_is_saved(self, registry, identity, petstore):
        cycle = RefreshCycle(registry, identity, _Source(petstore, _changed(petstore)))
        cycle.run()
        result = cycle.run()

        assert result.saved
        assert result.record.filename == "record_1"
        assert result.diff.messages == ["Module User description updated"]
        assert registry.get_latest(identity).mods[0]["description"] == "all user operations"

    def test_context_only_change_is_not_saved(self, registry, identity, petstore):
        noisy = copy.deepcopy(petstore)
        noisy["mods"][0]["context"] = {"fetchedAt": 123}
        cycle = RefreshCycle(registry, identity, _Source(petstore, noisy))
        cycle.run()
        assert not cycle.run().saved

    def test_naming_violation_persists_nothing(self, registry, identity, petstore):
        bad = copy.deepcopy(petstore)
        bad["mods"][0]["name"] = "用户"
        with pytest.raises(SchemaNamingError):
            RefreshCycle(registry, identity, _Source(bad)).run()
        assert registry.find_project(identity) is None

    def test_naming_check_can_be_disabled(self, registry, identity, petstore):
        bad = copy.deepcopy(petstore)
        bad["mods"][0]["name"] = "用户"
        assert RefreshCycle(registry, identity, _Source(bad), validate=False).run().saved

    def test_fetch_error_propagates(self, registry, identity):
        with pytest.raises(ConnectionError):
            RefreshCycle(registry, identity, _Source(ConnectionError("offline"))).run()
        assert registry.find_project(identity) is None


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestSnapshotPoller:
    def test_rejects_non_positive_interval(self, registry, identity, petstore):
        cycle = RefreshCycle(registry, identity, _Source(petstore))
        with pytest.raises(ValueError):
            SnapshotPoller(cycle, 0)

    def test_runs_immediately_and_repeats(self, registry, identity, petstore):
        source = _Source(petstore)
        results = []
        poller = SnapshotPoller(
            RefreshCycle(registry, identity, source), 0.02, on_result=results.append
        )
        poller.start()
        try:
            assert _wait_for(lambda: len(results) >= 3)
        finally:
            poller.stop()

        assert results[0].saved
        assert not any(r.saved for r in results[1:])

    def test_no_fetch_after_stop(self, registry, identity, petstore):
        source = _Source(petstore)
        poller = SnapshotPoller(RefreshCycle(registry, identity, source), 0.02)
        poller.start()
        assert _wait_for(lambda: source.calls >= 2)
        poller.stop()

        calls = source.calls
        time.sleep(0.1)
        assert source.calls == calls
        assert not poller.is_running

    def test_start_replaces_running_schedule(self, registry, identity, petstore):
        poller = SnapshotPoller(RefreshCycle(registry, identity, _Source(petstore)), 0.05)
        poller.start()
        first = poller._thread
        poller.start()
        try:
            assert not first.is_alive()
            assert poller.is_running
            assert poller._thread is not first
        finally:
            poller.stop()

    def test_stop_without_start_is_noop(self, registry, identity, petstore):
        poller = SnapshotPoller(RefreshCycle(registry, identity, _Source(petstore)), 1)
        poller.stop()
        assert not poller.is_running

    def test_failed_cycle_keeps_polling(self, registry, identity, petstore):
        source = _Source(ConnectionError("offline"), petstore)
        results = []
        poller = SnapshotPoller(
            RefreshCycle(registry, identity, source), 0.02, on_result=results.append
        )
        poller.start()
        try:
            assert _wait_for(lambda: len(results) >= 1)
        finally:
            poller.stop()
        assert source.calls >= 2
        assert results[0].saved

    def test_run_once_logs_failure(self, registry, identity, caplog):
        poller = SnapshotPoller(
            RefreshCycle(registry, identity, _Source(RuntimeError("boom"))), 1
        )
        assert poller.run_once() is None
        assert "Refresh cycle failed" in caplog.text

    def test_delayed_first_run(self, registry, identity, petstore):
        source = _Source(petstore)
        poller = SnapshotPoller(RefreshCycle(registry, identity, source), 10)
        poller.start(run_immediately=False)
        try:
            time.sleep(0.05)
            assert source.calls == 0
        finally:
            poller.stop()
