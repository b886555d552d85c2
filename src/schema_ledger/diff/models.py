"""Data models for schema diffs: named-set decomposition and labeled entity changes."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..snapshot.models import Entity

MODULE = "module"
BASE_TYPE = "base_type"

KIND_LABELS = {
    MODULE: "Module",
    BASE_TYPE: "Base Type",
}


@dataclass
class NamedSetDiff:
    """Entities of two collections matched by their ``name``.

    ``added`` keeps the order of the next collection, ``removed`` and
    ``matched`` keep the order of the previous one. Each matched item is a
    ``(previous, next)`` pair.
    """

    added: List[Entity] = field(default_factory=list)
    removed: List[Entity] = field(default_factory=list)
    matched: List[Tuple[Entity, Entity]] = field(default_factory=list)


@dataclass
class EntityChange:
    """A module or base type that was modified, removed or added.

    ``entity`` is the next version for modified and added entities and the
    previous version for removed ones.
    """

    kind: str  # "module" | "base_type"
    status: str  # "modified" | "removed" | "added"
    name: str
    details: List[str]
    entity: Entity = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "status": self.status,
            "name": self.name,
            "details": list(self.details),
        }


@dataclass
class SnapshotDiff:
    """Changes between two snapshots, one list per top-level category.

    Each list holds modified entities first, then removed, then added.
    """

    mod_changes: List[EntityChange] = field(default_factory=list)
    base_type_changes: List[EntityChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.mod_changes and not self.base_type_changes

    @property
    def messages(self) -> List[str]:
        """Every change item, modules first."""
        return [
            msg
            for change in (*self.mod_changes, *self.base_type_changes)
            for msg in change.details
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modDiffs": [c.to_dict() for c in self.mod_changes],
            "boDiffs": [c.to_dict() for c in self.base_type_changes],
        }
