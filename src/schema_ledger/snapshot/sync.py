"""Bring a local snapshot in line with the remote one, entity by entity.

Used after a diff has been reviewed: the caller adopts the remote version of
selected modules or base types (or of everything) into its local copy.
"""

import copy
from typing import List

from .models import DataSourceSnapshot, Entity


def _adopt(local: List[Entity], remote: List[Entity], name: str) -> tuple[List[Entity], bool]:
    """Return the new local list and whether it needs re-sorting."""
    remote_entity = next((e for e in remote if e.get("name") == name), None)
    if remote_entity is None:
        return [e for e in local if e.get("name") != name], False

    adopted = copy.deepcopy(remote_entity)
    for index, entity in enumerate(local):
        if entity.get("name") == name:
            updated = list(local)
            updated[index] = adopted
            return updated, False
    return [*local, adopted], True


def adopt_module(local: DataSourceSnapshot, remote: DataSourceSnapshot, name: str) -> None:
    """Replace, add or drop module ``name`` in ``local`` to match ``remote``."""
    local.mods, added = _adopt(local.mods, remote.mods, name)
    if added:
        local.reorder()


def adopt_base_type(local: DataSourceSnapshot, remote: DataSourceSnapshot, name: str) -> None:
    """Replace, add or drop base type ``name`` in ``local`` to match ``remote``."""
    local.base_classes, added = _adopt(local.base_classes, remote.base_classes, name)
    if added:
        local.reorder()


def adopt_all(remote: DataSourceSnapshot) -> DataSourceSnapshot:
    """A local copy identical to ``remote``."""
    return remote.copy()
