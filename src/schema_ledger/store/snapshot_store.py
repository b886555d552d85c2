"""JSON document store rooted at a single directory (``~/.schema-ledger`` by default).

Every document is addressed by a relative storage key such as
``projects_manifest.json`` or ``project_0/record_3``.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from ..exceptions import InvalidKeyError, StoreWriteError
from ..logging_config import get_logger

logger = get_logger(__name__)


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


# mkstemp creates files as 0600; saved documents get the mode a plain open() would give
FILE_MODE = 0o666 & ~_current_umask()


class SnapshotStore:
    """Reads and writes JSON documents under ``root_dir``.

    Missing or unparseable documents load as ``None``; callers treat that as
    "not seeded yet". Write failures raise ``StoreWriteError``.

    Usage::

        store = SnapshotStore("~/.schema-ledger")
        store.save("project_0/record_0", {"name": "petstore", "mods": []})
        doc = store.load("project_0/record_0")
    """

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir: Path = Path(root_dir).expanduser().resolve()
        self._ensure_root()

    def _ensure_root(self) -> None:
        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(self.root_dir, str(e)) from e
        logger.debug("Snapshot store rooted at %s", self.root_dir)

    # ── paths ─────────────────────────────────────────────────────

    def resolve_path(self, key: str) -> Path:
        """Return the absolute path for ``key``.

        Raises
        ------
        InvalidKeyError
            If the key is empty, absolute, or climbs out of the root.
        """
        parts = PurePosixPath(key.replace("\\", "/")).parts
        if not parts or parts[0] == "/" or ".." in parts:
            raise InvalidKeyError(key)
        return self.root_dir.joinpath(*parts)

    def exists(self, key: str) -> bool:
        return self.resolve_path(key).exists()

    # ── reads ─────────────────────────────────────────────────────

    def load_text(self, key: str) -> Optional[str]:
        """Return the raw content stored under ``key``, or ``None`` if absent."""
        path = self.resolve_path(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def load(self, key: str) -> Optional[Any]:
        """Load and parse the JSON document stored under ``key``.

        Returns ``None`` when the document is missing, empty, or not valid JSON.
        """
        try:
            content = self.load_text(key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", key, e)
            return None
        if not content:
            return None
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unparseable document %s: %s", key, e)
            return None

    async def load_async(self, key: str) -> Optional[Any]:
        """Same contract as :meth:`load`, with the file read off the event loop."""
        return await asyncio.to_thread(self.load, key)

    # ── writes ────────────────────────────────────────────────────

    def save(self, key: str, document: Any) -> Path:
        """Serialize ``document`` as JSON and write it under ``key``.

        Parent directories are created as needed and the file is replaced
        atomically, so readers never observe a half-written document.
        """
        content = json.dumps(document, indent=2, ensure_ascii=False)
        return self.save_text(key, content)

    def save_text(self, key: str, content: str) -> Path:
        """Write raw ``content`` under ``key`` atomically."""
        path = self.resolve_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.chmod(tmp, FILE_MODE)
                os.replace(tmp, path)
            finally:
                if os.path.exists(tmp):
                    os.unlink(tmp)
        except OSError as e:
            raise StoreWriteError(path, str(e)) from e
        logger.debug("Wrote %s (%d bytes)", key, len(content))
        return path

    def remove(self, key: str) -> None:
        """Delete the file or directory stored under ``key`` if present."""
        path = self.resolve_path(key)
        try:
            if path.is_dir():
                shutil.rmtree(path)
            elif path.exists():
                path.unlink()
        except OSError as e:
            raise StoreWriteError(path, str(e)) from e
