"""Snapshot layer: the schema document model, naming policy and local sync."""

from .models import DataSourceSnapshot, Entity, as_snapshot
from .sync import adopt_all, adopt_base_type, adopt_module
from .validation import check_naming, find_naming_violations, is_portable_name

__all__ = [
    "DataSourceSnapshot",
    "Entity",
    "adopt_all",
    "adopt_base_type",
    "adopt_module",
    "as_snapshot",
    "check_naming",
    "find_naming_violations",
    "is_portable_name",
]
