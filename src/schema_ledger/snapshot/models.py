"""Data model for a captured data source schema."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

# Entities stay plain JSON values: dict / list / str / int / float / bool / None.
Entity = Dict[str, Any]


@dataclass
class DataSourceSnapshot:
    """One captured version of a remote API schema.

    ``mods`` holds the modules (each with ``interfaces``) and ``base_classes``
    holds the shared base types (each with ``properties``). Entities are kept
    as JSON mappings so arbitrary parameter and response shapes survive a
    round trip through the store untouched.
    """

    name: str = ""
    mods: List[Entity] = field(default_factory=list)
    base_classes: List[Entity] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataSourceSnapshot":
        return cls(
            name=data.get("name") or "",
            mods=list(data.get("mods") or []),
            base_classes=list(data.get("baseClasses") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "mods": self.mods,
            "baseClasses": self.base_classes,
        }

    def copy(self) -> "DataSourceSnapshot":
        return DataSourceSnapshot(
            name=self.name,
            mods=copy.deepcopy(self.mods),
            base_classes=copy.deepcopy(self.base_classes),
        )

    def reorder(self) -> None:
        """Sort modules and base types by name, in place."""
        self.mods.sort(key=lambda m: m.get("name") or "")
        self.base_classes.sort(key=lambda b: b.get("name") or "")


def as_snapshot(value: Any) -> DataSourceSnapshot:
    """Accept a ``DataSourceSnapshot`` or its JSON mapping."""
    if isinstance(value, DataSourceSnapshot):
        return value
    if isinstance(value, dict):
        return DataSourceSnapshot.from_dict(value)
    raise TypeError(f"Expected a data source snapshot, got {type(value).__name__}")
