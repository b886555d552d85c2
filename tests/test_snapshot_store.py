"""Tests for the JSON snapshot store."""

import asyncio
import json
import logging
import os
import stat

import pytest

from schema_ledger.exceptions import InvalidKeyError, StoreWriteError
from schema_ledger.store.snapshot_store import SnapshotStore


class TestRoot:
    def test_creates_root_directory(self, tmp_path):
        root = tmp_path / "a" / "b"
        store = SnapshotStore(root)
        assert root.is_dir()
        assert store.root_dir == root.resolve()

    def test_existing_root_is_reused(self, tmp_path):
        SnapshotStore(tmp_path).save("doc.json", {"x": 1})
        assert SnapshotStore(tmp_path).load("doc.json") == {"x": 1}


class TestPaths:
    def test_resolve_path_is_under_root(self, store):
        assert store.resolve_path("project_0/record_1") == store.root_dir / "project_0" / "record_1"

    @pytest.mark.parametrize("key", ["", "../escape", "project_0/../../escape", "/etc/passwd"])
    def test_rejects_keys_outside_root(self, store, key):
        with pytest.raises(InvalidKeyError):
            store.resolve_path(key)

    def test_exists(self, store):
        assert not store.exists("doc.json")
        store.save("doc.json", {})
        assert store.exists("doc.json")


class TestLoad:
    def test_missing_document_is_none(self, store):
        assert store.load("nothing/here") is None

    def test_empty_document_is_none(self, store):
        store.save_text("empty.json", "")
        assert store.load("empty.json") is None

    def test_unparseable_document_is_none_and_logged(self, store, caplog):
        store.save_text("broken.json", "{not json")
        with caplog.at_level(logging.WARNING, logger="schema_ledger"):
            assert store.load("broken.json") is None
        assert any("broken.json" in r.getMessage() for r in caplog.records)

    def test_load_text_returns_raw_content(self, store):
        store.save_text("raw", "hello")
        assert store.load_text("raw") == "hello"
        assert store.load_text("missing") is None

    def test_load_async(self, store):
        store.save("doc.json", {"name": "petstore"})
        assert asyncio.run(store.load_async("doc.json")) == {"name": "petstore"}
        assert asyncio.run(store.load_async("missing.json")) is None


class TestSave:
    def test_roundtrip(self, store):
        doc = {"name": "petstore", "mods": [{"name": "User"}], "baseClasses": []}
        store.save("project_0/record_0", doc)
        assert store.load("project_0/record_0") == doc

    def test_creates_intermediate_directories(self, store):
        path = store.save("a/b/c/doc.json", [1, 2, 3])
        assert path.is_file()
        assert (store.root_dir / "a" / "b" / "c").is_dir()

    def test_writes_indented_json(self, store):
        path = store.save("doc.json", {"a": 1})
        assert path.read_text(encoding="utf-8") == json.dumps({"a": 1}, indent=2)

    def test_overwrite_leaves_no_temp_files(self, store):
        store.save("doc.json", {"v": 1})
        store.save("doc.json", {"v": 2})
        assert store.load("doc.json") == {"v": 2}
        assert [p.name for p in store.root_dir.iterdir()] == ["doc.json"]

    def test_saved_file_follows_umask(self, store):
        mask = os.umask(0)
        os.umask(mask)
        path = store.save("doc.json", {})
        assert stat.S_IMODE(path.stat().st_mode) == 0o666 & ~mask

    def test_write_failure_raises(self, store):
        store.save_text("blocker", "a file, not a directory")
        with pytest.raises(StoreWriteError) as exc_info:
            store.save("blocker/child.json", {})
        assert exc_info.value.path == store.resolve_path("blocker/child.json")


class TestRemove:
    def test_remove_file(self, store):
        store.save("doc.json", {})
        store.remove("doc.json")
        assert not store.exists("doc.json")

    def test_remove_directory(self, store):
        store.save("project_0/record_0", {})
        store.remove("project_0")
        assert not store.exists("project_0")

    def test_remove_missing_is_noop(self, store):
        store.remove("never/written")
