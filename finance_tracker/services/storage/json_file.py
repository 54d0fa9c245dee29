"""
JSON File Document Store

DESIGN DECISION: Each key is stored as one file under a data directory.
This gives us:
1. Human-readable snapshots users can back up or inspect
2. No database setup required
3. Independent files per store slice (no cross-store contention)

TRADEOFFS:
- Whole-slice rewrites on every change (fine for personal data volumes)
- No multi-process locking (one client owns the directory)

Blocking file I/O runs in a worker thread so the event loop never waits
on the disk. Writes go to a temp file first and are then renamed over the
target, so a crash mid-write leaves the previous snapshot intact.
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from finance_tracker.config import get_settings
from finance_tracker.services.storage.interface import (
    DocumentStoreInterface,
    StorageError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileDocumentStore(DocumentStoreInterface):
    """File-per-key implementation of the document store."""

    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir) if data_dir else get_settings().storage.data_path

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        """Map a key to its file, refusing keys that could escape the directory."""
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise StorageError(f"Invalid document key: {key!r}")
        return self._data_dir / f"{key}.json"

    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write(self, path: Path, blob: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(blob)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _delete(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False

    async def get(self, key: str) -> Optional[str]:
        """Read a document; a missing file returns None."""
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(self._read, path)
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}")

    async def set(self, key: str, blob: str) -> bool:
        """Atomically replace a document."""
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, blob)
            return True
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}")

    async def remove(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(self._delete, path)
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}")
