from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class SnapshotStore:
    """File-backed snapshot storage.

    ``write`` stages the blob in ``<file>.tmp``, keeps the previous snapshot as
    ``<file>.bak`` and then swaps the new file in with ``os.replace``.
    """

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)

    @property
    def tmp_path(self) -> Path:
        return self.file_path.with_name(self.file_path.name + ".tmp")

    @property
    def backup_path(self) -> Path:
        return self.file_path.with_name(self.file_path.name + ".bak")

    def write(self, blob: bytes) -> Path:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.tmp_path
        with tmp_path.open("wb") as handle:
            handle.write(blob)
            handle.flush()
            os.fsync(handle.fileno())
        if self.file_path.exists():
            shutil.copy2(self.file_path, self.backup_path)
        os.replace(tmp_path, self.file_path)
        logger.info("Snapshot written to %s (%d bytes)", self.file_path, len(blob))
        return self.file_path

    def read(self) -> bytes | None:
        if not self.file_path.exists():
            return None
        return self.file_path.read_bytes()

    def read_backup(self) -> bytes | None:
        if not self.backup_path.exists():
            return None
        return self.backup_path.read_bytes()
