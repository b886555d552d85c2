"""Shared fixtures for Schema Ledger tests."""

import pytest

from schema_ledger.store.models import ProjectIdentity
from schema_ledger.store.registry import ManifestRegistry
from schema_ledger.store.snapshot_store import SnapshotStore


@pytest.fixture
def store(tmp_path):
    """Snapshot store rooted in a fresh temporary directory."""
    return SnapshotStore(tmp_path / "ledger")


@pytest.fixture
def registry(store):
    return ManifestRegistry(store)


@pytest.fixture
def identity():
    return ProjectIdentity("/work/shop", "http://api.example.com/schema.json")


@pytest.fixture
def petstore():
    """A small data source with one module and one base type."""
    return {
        "name": "petstore",
        "mods": [
            {
                "name": "User",
                "description": "user operations",
                "interfaces": [
                    {
                        "name": "getUser",
                        "description": "fetch",
                        "method": "GET",
                        "parameters": [{"name": "id", "dataType": {"typeName": "number"}}],
                        "response": {"typeName": "UserDTO"},
                    }
                ],
            }
        ],
        "baseClasses": [
            {
                "name": "Order",
                "description": "an order",
                "properties": [
                    {"name": "id", "dataType": {"typeName": "number"}},
                    {"name": "status", "dataType": {"typeName": "string"}},
                ],
            }
        ],
    }
