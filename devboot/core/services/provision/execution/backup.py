"""
L4 Execution — Pre-mutation backups.

One timestamped backup directory per run, created lazily the first
time something actually needs backing up.
"""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class BackupRecord:
    """Timestamped directory holding pre-mutation copies for one run.

    The directory name is fixed when the record is created
    (``YYYYMMDD-HHMMSS``) but the directory itself only appears on the
    first call to :meth:`backup_if_exists` that finds something to
    copy.  If another run already owns that name a numeric suffix is
    added, and entries within the run are never overwritten.
    """

    def __init__(self, root: Path, *, now: datetime | None = None) -> None:
        self.root = root
        self.stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
        self.entries: list[Path] = []
        self._path: Path | None = None

    @property
    def path(self) -> Path | None:
        """The backup directory, or None if nothing was backed up yet."""
        return self._path

    @property
    def created(self) -> bool:
        return self._path is not None

    def _ensure_dir(self) -> Path:
        if self._path is None:
            candidate = self.root / self.stamp
            n = 1
            while candidate.exists():
                candidate = self.root / f"{self.stamp}-{n}"
                n += 1
            candidate.mkdir(parents=True)
            self._path = candidate
        return self._path

    def _unique_dest(self, name: str) -> Path:
        base = self._ensure_dir()
        dest = base / name
        n = 1
        while dest.exists() or dest.is_symlink():
            dest = base / f"{name}.{n}"
            n += 1
        return dest

    def backup_if_exists(self, path: Path) -> bool:
        """Copy ``path`` into the backup directory if it exists.

        Symlinks are recorded as symlinks, directories are copied
        recursively (inner symlinks preserved), files keep their
        metadata.

        Returns:
            True if a backup was made, False if ``path`` does not exist.

        Raises:
            OSError: If the copy fails; the caller decides what that
                means for its step.
        """
        if not (path.exists() or path.is_symlink()):
            return False

        dest = self._unique_dest(path.name)
        logger.info("Backing up existing %s to %s", path, dest)

        if path.is_symlink():
            os.symlink(os.readlink(path), dest)
        elif path.is_dir():
            shutil.copytree(path, dest, symlinks=True)
        else:
            shutil.copy2(path, dest)

        self.entries.append(dest)
        return True
