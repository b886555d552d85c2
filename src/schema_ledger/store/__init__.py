"""Persistent manifest and snapshot store."""

from .models import Manifest, Project, ProjectIdentity, Record
from .registry import ManifestRegistry
from .snapshot_store import SnapshotStore

__all__ = [
    "Manifest",
    "ManifestRegistry",
    "Project",
    "ProjectIdentity",
    "Record",
    "SnapshotStore",
]
