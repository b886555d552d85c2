"""Diff engine: structured, human-readable changes between two schema snapshots.

The comparison works top-down:
  1. Snapshot: modules and base types are diffed independently by name.
  2. Module: description, then interfaces by name; matched interfaces recurse.
  3. Interface: description, method, parameters by name, response shape.
  4. Base type: description, then properties by name.

Every entity tree is canonicalized (context fields stripped) before any
comparison, so two snapshots that differ only in bookkeeping produce no
change items. Shapes are compared with true structural equality.

Within one entity the items are ordered: own field changes, modifications of
children, removed children, added children.
"""

from typing import Any, Dict, List, Optional, Sequence

from ..snapshot.models import DataSourceSnapshot, Entity, as_snapshot
from .canonical import CONTEXT_KEY, deep_equal, strip_context
from .models import BASE_TYPE, KIND_LABELS, MODULE, EntityChange, NamedSetDiff, SnapshotDiff

# ── Named-set diff ───────────────────────────────────────────────────────────


def _by_name(entities: Sequence[Entity]) -> Dict[Any, Entity]:
    index: Dict[Any, Entity] = {}
    for entity in entities:
        index.setdefault(entity.get("name"), entity)
    return index


def diff_by_name(previous: Sequence[Entity], following: Sequence[Entity]) -> NamedSetDiff:
    """Split two entity collections into added, removed and matched by ``name``."""
    prev_index = _by_name(previous)
    next_index = _by_name(following)

    return NamedSetDiff(
        added=[e for e in following if e.get("name") not in prev_index],
        removed=[e for e in previous if e.get("name") not in next_index],
        matched=[(e, next_index[e.get("name")]) for e in previous if e.get("name") in next_index],
    )


def _field_changed(prev: Entity, nxt: Entity, field_name: str, key: str) -> bool:
    # Missing fields read as None, which is distinct from "".
    return not deep_equal(prev.get(field_name), nxt.get(field_name), key)


def _children(entity: Entity, field_name: str) -> List[Entity]:
    return list(entity.get(field_name) or [])


# ── Entity-level comparison ─────────────────────────────────────────────────


def diff_interface(
    prev: Entity,
    nxt: Entity,
    label: str,
    key: str = CONTEXT_KEY,
) -> List[str]:
    """Change items for one interface present in both snapshots.

    ``label`` identifies the interface in messages, e.g.
    ``"Module User interface getUser"``.
    """
    details: List[str] = []
    if _field_changed(prev, nxt, "description", key):
        details.append(f"{label} description updated")
    if _field_changed(prev, nxt, "method", key):
        details.append(f"{label} method updated")

    params = diff_by_name(_children(prev, "parameters"), _children(nxt, "parameters"))

    updates = [
        f"{label} parameter {p.get('name')} updated"
        for p, n in params.matched
        if not deep_equal(p, n, key)
    ]
    if _field_changed(prev, nxt, "response", key):
        updates.append(f"{label} response type updated")

    removed = [f"{label} removed parameter {p.get('name')}" for p in params.removed]
    added = [f"{label} added parameter {p.get('name')}" for p in params.added]

    return [*details, *updates, *removed, *added]


def diff_module(prev: Entity, nxt: Entity, key: str = CONTEXT_KEY) -> List[str]:
    """Change items for one module present in both snapshots."""
    label = f"{KIND_LABELS[MODULE]} {prev.get('name')}"
    details: List[str] = []
    if _field_changed(prev, nxt, "description", key):
        details.append(f"{label} description updated")

    interfaces = diff_by_name(_children(prev, "interfaces"), _children(nxt, "interfaces"))

    updates: List[str] = []
    for p, n in interfaces.matched:
        updates.extend(diff_interface(p, n, f"{label} interface {p.get('name')}", key))

    removed = [f"{label} removed interface {i.get('name')}" for i in interfaces.removed]
    added = [f"{label} added interface {i.get('name')}" for i in interfaces.added]

    return [*details, *updates, *removed, *added]


def diff_base_type(
    prev: Entity,
    nxt: Entity,
    itemize: bool = False,
    key: str = CONTEXT_KEY,
) -> List[str]:
    """Change items for one base type present in both snapshots.

    Modified properties collapse into a single "properties updated" item
    unless ``itemize`` is set, in which case each gets its own item.
    """
    label = f"{KIND_LABELS[BASE_TYPE]} {prev.get('name')}"
    details: List[str] = []
    if _field_changed(prev, nxt, "description", key):
        details.append(f"{label} description updated")

    props = diff_by_name(_children(prev, "properties"), _children(nxt, "properties"))

    changed = [p.get("name") for p, n in props.matched if not deep_equal(p, n, key)]
    if changed:
        if itemize:
            details.extend(f"{label} property {name} updated" for name in changed)
        else:
            details.append(f"{label} properties updated")

    removed = [f"{label} removed property {p.get('name')}" for p in props.removed]
    added = [f"{label} added property {p.get('name')}" for p in props.added]

    return [*details, *removed, *added]


# ── Top-level comparison ────────────────────────────────────────────────────


def diff_entities(
    previous: Sequence[Entity],
    following: Sequence[Entity],
    kind: str = MODULE,
    itemize_properties: bool = False,
    key: str = CONTEXT_KEY,
) -> List[EntityChange]:
    """Diff two top-level collections (modules or base types).

    Returns modified entities (with their detail items) first, then removed,
    then added. Matched entities without any detail item are omitted.
    """
    if kind not in KIND_LABELS:
        raise ValueError(f"Unknown entity kind: {kind!r}")
    label = KIND_LABELS[kind]

    previous = strip_context(list(previous), key)
    following = strip_context(list(following), key)
    split = diff_by_name(previous, following)

    modified: List[EntityChange] = []
    for prev, nxt in split.matched:
        if kind == MODULE:
            details = diff_module(prev, nxt, key)
        else:
            details = diff_base_type(prev, nxt, itemize_properties, key)
        if details:
            modified.append(EntityChange(kind, "modified", nxt.get("name"), details, nxt))

    removed = [
        EntityChange(kind, "removed", e.get("name"), [f"{label} {e.get('name')} removed"], e)
        for e in split.removed
    ]
    added = [
        EntityChange(kind, "added", e.get("name"), [f"{label} {e.get('name')} added"], e)
        for e in split.added
    ]

    return [*modified, *removed, *added]


def diff_snapshots(
    previous: Optional[Any],
    following: Optional[Any],
    itemize_properties: bool = False,
    key: str = CONTEXT_KEY,
) -> SnapshotDiff:
    """Compute the module and base type changes from ``previous`` to ``following``.

    Args:
        previous: The earlier snapshot (``DataSourceSnapshot`` or its JSON
            mapping). ``None`` is treated as an empty snapshot.
        following: The later snapshot, same forms as ``previous``.
        itemize_properties: Report each modified base type property separately.
        key: Context key stripped before comparison.

    Returns:
        A SnapshotDiff with one ordered change list per category.
    """
    prev = as_snapshot(previous) if previous is not None else DataSourceSnapshot()
    nxt = as_snapshot(following) if following is not None else DataSourceSnapshot()

    return SnapshotDiff(
        mod_changes=diff_entities(prev.mods, nxt.mods, MODULE, key=key),
        base_type_changes=diff_entities(
            prev.base_classes,
            nxt.base_classes,
            BASE_TYPE,
            itemize_properties=itemize_properties,
            key=key,
        ),
    )
