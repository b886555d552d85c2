"""Manifest data models: projects and the records that point at their snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

SAVE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_save_time() -> str:
    """Local wall-clock time in the manifest's ``saveTime`` format."""
    return datetime.now().strftime(SAVE_TIME_FORMAT)


@dataclass(frozen=True)
class ProjectIdentity:
    """What makes a project unique: the local project name plus the schema origin.

    Both fields are compared as exact, case-sensitive strings.
    """

    project_name: str
    origin_url: str


@dataclass(frozen=True)
class Record:
    """Pointer to one persisted snapshot inside a project's directory."""

    filename: str
    save_time: str = field(default_factory=now_save_time)

    def to_dict(self) -> Dict[str, Any]:
        return {"filename": self.filename, "saveTime": self.save_time}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Record":
        return cls(filename=data["filename"], save_time=data.get("saveTime", ""))


@dataclass
class Project:
    """One tracked (project, origin) pair with its append-only record history."""

    project_name: str
    origin_url: str
    project_path: str
    records: List[Record] = field(default_factory=list)

    @property
    def identity(self) -> ProjectIdentity:
        return ProjectIdentity(self.project_name, self.origin_url)

    def matches(self, identity: ProjectIdentity) -> bool:
        return (
            self.project_name == identity.project_name
            and self.origin_url == identity.origin_url
        )

    def record_key(self, record: Record) -> str:
        """Storage key of ``record``'s content."""
        return f"{self.project_path}/{record.filename}"

    @property
    def latest_record(self) -> Optional[Record]:
        return self.records[-1] if self.records else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectName": self.project_name,
            "originUrl": self.origin_url,
            "projectPath": self.project_path,
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            project_name=data["projectName"],
            origin_url=data["originUrl"],
            project_path=data["projectPath"],
            records=[Record.from_dict(r) for r in data.get("records") or []],
        )


@dataclass
class Manifest:
    """Root index of every known project, in creation order."""

    projects: List[Project] = field(default_factory=list)

    def find(self, identity: ProjectIdentity) -> Optional[Project]:
        for project in self.projects:
            if project.matches(identity):
                return project
        return None

    def find_by_path(self, project_path: str) -> Optional[Project]:
        for project in self.projects:
            if project.project_path == project_path:
                return project
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"projects": [p.to_dict() for p in self.projects]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        return cls(projects=[Project.from_dict(p) for p in data.get("projects") or []])
