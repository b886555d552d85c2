"""Diff layer: structural comparison of schema snapshots."""

from .canonical import deep_equal, strip_context
from .engine import (
    diff_base_type,
    diff_by_name,
    diff_entities,
    diff_interface,
    diff_module,
    diff_snapshots,
)
from .models import BASE_TYPE, MODULE, EntityChange, NamedSetDiff, SnapshotDiff

__all__ = [
    "BASE_TYPE",
    "MODULE",
    "EntityChange",
    "NamedSetDiff",
    "SnapshotDiff",
    "deep_equal",
    "diff_base_type",
    "diff_by_name",
    "diff_entities",
    "diff_interface",
    "diff_module",
    "diff_snapshots",
    "strip_context",
]
