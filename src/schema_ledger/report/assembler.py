"""Fold a project's record history into per-capture diff entries.

Rendering is left to the caller; :meth:`ReportData.to_dict` is the hand-off
format.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..diff.engine import diff_snapshots
from ..diff.models import EntityChange, SnapshotDiff
from ..exceptions import ProjectNotFoundError
from ..logging_config import get_logger
from ..snapshot.models import DataSourceSnapshot
from ..store.models import Project, ProjectIdentity, Record
from ..store.registry import ManifestRegistry

logger = get_logger(__name__)


@dataclass
class ReportEntry:
    """Changes introduced by one capture relative to the capture before it."""

    save_time: str
    mod_changes: List[EntityChange] = field(default_factory=list)
    base_type_changes: List[EntityChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.mod_changes and not self.base_type_changes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "saveTime": self.save_time,
            "modDiffs": [c.to_dict() for c in self.mod_changes],
            "boDiffs": [c.to_dict() for c in self.base_type_changes],
        }


@dataclass
class ReportData:
    """A project's records and the chronologically ordered diffs between them."""

    project: Project
    records: List[Record]
    diffs: List[ReportEntry]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectName": self.project.project_name,
            "originUrl": self.project.origin_url,
            "records": [r.to_dict() for r in self.records],
            "diffs": [d.to_dict() for d in self.diffs],
        }


def _load_or_empty(
    registry: ManifestRegistry, project: Project, record: Record
) -> DataSourceSnapshot:
    snapshot = registry.load_record(project, record)
    if snapshot is None:
        logger.warning(
            "Record %s of %s is unreadable; treating it as empty",
            record.filename,
            project.project_path,
        )
        return DataSourceSnapshot()
    return snapshot


def build_report(
    registry: ManifestRegistry,
    identity: ProjectIdentity,
    itemize_properties: bool = False,
    context_key: str = "context",
) -> ReportData:
    """Diff every consecutive pair of records recorded for ``identity``.

    The first record has no predecessor and yields no entry, so a project
    with K records produces K - 1 entries.

    Raises
    ------
    ProjectNotFoundError
        If the project has never been recorded.
    """
    project = registry.find_project(identity)
    if project is None:
        raise ProjectNotFoundError(identity.project_name, identity.origin_url)

    entries: List[ReportEntry] = []
    previous: Optional[DataSourceSnapshot] = None
    for index, record in enumerate(project.records):
        current = _load_or_empty(registry, project, record)
        if index > 0:
            diff = diff_snapshots(
                previous, current, itemize_properties=itemize_properties, key=context_key
            )
            entries.append(
                ReportEntry(
                    save_time=record.save_time,
                    mod_changes=diff.mod_changes,
                    base_type_changes=diff.base_type_changes,
                )
            )
        previous = current

    logger.debug(
        "Report for %s: %d records, %d diffs",
        project.project_path,
        len(project.records),
        len(entries),
    )
    return ReportData(project=project, records=list(project.records), diffs=entries)


def latest_changes(
    registry: ManifestRegistry,
    identity: ProjectIdentity,
    itemize_properties: bool = False,
    context_key: str = "context",
) -> Tuple[Optional[DataSourceSnapshot], Optional[SnapshotDiff]]:
    """The latest snapshot and its diff from the one recorded before it.

    Returns ``(None, None)`` for an unknown or empty project and
    ``(latest, None)`` when only one record exists.
    """
    project = registry.find_project(identity)
    if project is None or not project.records:
        return None, None

    latest = registry.load_record(project, project.records[-1])
    if len(project.records) < 2:
        return latest, None

    previous = _load_or_empty(registry, project, project.records[-2])
    diff = diff_snapshots(
        previous,
        latest if latest is not None else DataSourceSnapshot(),
        itemize_properties=itemize_properties,
        key=context_key,
    )
    return latest, diff
