"""Manifest registry: which projects exist and which snapshots each one recorded.

Layout under the store root::

    projects_manifest.json
    project_0/record_0
    project_0/record_1
    project_1/record_0

The manifest is the single source of truth. A record is added to it only
after its content has been written, so a crash between the two steps leaves
an unreferenced file behind, never a record pointing at nothing.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..exceptions import ProjectNotFoundError
from ..logging_config import get_logger
from ..snapshot.models import DataSourceSnapshot, as_snapshot
from .models import Manifest, Project, ProjectIdentity, Record
from .snapshot_store import SnapshotStore

logger = get_logger(__name__)

DEFAULT_MANIFEST_FILENAME = "projects_manifest.json"


class ManifestRegistry:
    """Indexes snapshots per project on top of a :class:`SnapshotStore`.

    Assumes a single writer; there is no file locking.

    Usage::

        registry = ManifestRegistry(SnapshotStore(root))
        identity = ProjectIdentity("/work/shop", "http://api.example.com/schema.json")
        registry.save_snapshot(identity, snapshot)
        latest = registry.get_latest(identity)
    """

    def __init__(
        self,
        store: SnapshotStore,
        manifest_filename: str = DEFAULT_MANIFEST_FILENAME,
    ) -> None:
        self.store = store
        self.manifest_key = manifest_filename

    # ── manifest ──────────────────────────────────────────────────

    def get_manifest(self) -> Manifest:
        """Load the manifest, creating an empty one on first use or after corruption."""
        document = self.store.load(self.manifest_key)
        if isinstance(document, dict):
            try:
                return Manifest.from_dict(document)
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Manifest %s has an unexpected shape: %r", self.manifest_key, e)

        if self.store.exists(self.manifest_key):
            self._set_aside_unreadable_manifest()

        manifest = Manifest()
        self.save_manifest(manifest)
        logger.info("Initialized empty manifest at %s", self.store.resolve_path(self.manifest_key))
        return manifest

    def save_manifest(self, manifest: Manifest) -> None:
        self.store.save(self.manifest_key, manifest.to_dict())

    def _set_aside_unreadable_manifest(self) -> None:
        backup_key = self._next_backup_key()
        content = self.store.load_text(self.manifest_key) or ""
        self.store.save_text(backup_key, content)
        logger.warning(
            "Manifest %s is unreadable; kept a copy as %s and started a new one",
            self.manifest_key,
            backup_key,
        )

    def _next_backup_key(self) -> str:
        """First unused backup key: ``<manifest>.bak``, then ``.bak.1``, ``.bak.2`` ..."""
        backup_key = f"{self.manifest_key}.bak"
        index = 0
        while self.store.exists(backup_key):
            index += 1
            backup_key = f"{self.manifest_key}.bak.{index}"
        return backup_key

    # ── projects ──────────────────────────────────────────────────

    def list_projects(self) -> List[Project]:
        return self.get_manifest().projects

    def find_project(self, identity: ProjectIdentity) -> Optional[Project]:
        return self.get_manifest().find(identity)

    def create_project(self, identity: ProjectIdentity) -> Project:
        """Register a new project with the next sequential storage prefix."""
        manifest = self.get_manifest()
        project = Project(
            project_name=identity.project_name,
            origin_url=identity.origin_url,
            project_path=f"project_{len(manifest.projects)}",
            records=[],
        )
        manifest.projects.append(project)
        self.save_manifest(manifest)
        logger.info("Created project %s for %s", project.project_path, identity.project_name)
        return project

    # ── records ───────────────────────────────────────────────────

    def append_record(self, project: Project, content: Any) -> Record:
        """Persist ``content`` as the project's next record.

        The content is written before the manifest so a failed manifest write
        only orphans the content file.

        Raises
        ------
        ProjectNotFoundError
            If ``project`` is not registered in the manifest.
        StoreWriteError
            If either write fails.
        """
        manifest = self.get_manifest()
        registered = manifest.find_by_path(project.project_path)
        if registered is None or not registered.matches(project.identity):
            raise ProjectNotFoundError(project.project_name, project.origin_url)

        record = Record(filename=f"record_{len(registered.records)}")
        self.store.save(registered.record_key(record), content)

        registered.records.append(record)
        if project is not registered:
            project.records = list(registered.records)
        self.save_manifest(manifest)

        logger.debug("Appended %s to %s", record.filename, project.project_path)
        return record

    def load_record(self, project: Project, record: Record) -> Optional[DataSourceSnapshot]:
        """Load the snapshot a record points at, or ``None`` if it is unreadable."""
        document = self.store.load(project.record_key(record))
        if not isinstance(document, dict):
            return None
        return DataSourceSnapshot.from_dict(document)

    def get_latest(self, identity: ProjectIdentity) -> Optional[DataSourceSnapshot]:
        """Most recently recorded snapshot for ``identity``, if any."""
        project = self.find_project(identity)
        if project is None or project.latest_record is None:
            return None
        return self.load_record(project, project.latest_record)

    def save_snapshot(self, identity: ProjectIdentity, snapshot: Any) -> Record:
        """Record ``snapshot`` for ``identity``, creating the project if needed."""
        project = self.find_project(identity)
        if project is None:
            project = self.create_project(identity)
        return self.append_record(project, as_snapshot(snapshot).to_dict())
