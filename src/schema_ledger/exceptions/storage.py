"""Storage and registry exceptions: write failures, bad keys, unknown projects."""

from pathlib import Path

from .base import SchemaLedgerError


class StoreError(SchemaLedgerError):
    """Base class for snapshot store errors."""

    pass


class StoreWriteError(StoreError):
    """Raised when a document cannot be written to the store."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot write document: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class InvalidKeyError(StoreError):
    """Raised when a storage key would resolve outside the store root."""

    def __init__(self, key: str):
        super().__init__(f"Invalid storage key: {key!r}", details={"key": key})
        self.key = key


class RegistryError(SchemaLedgerError):
    """Base class for manifest registry errors."""

    pass


class ProjectNotFoundError(RegistryError):
    """Raised when a project has no recorded history."""

    def __init__(self, project_name: str, origin_url: str):
        super().__init__(
            f"No history for project: {project_name}",
            details={"project_name": project_name, "origin_url": origin_url},
        )
        self.project_name = project_name
        self.origin_url = origin_url
