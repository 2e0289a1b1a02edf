"""Timestamped zip snapshots of the pages directory with a retention limit."""

import zipfile
from datetime import datetime
from pathlib import Path

from loguru import logger

ARCHIVE_PREFIX = "pages-"
ARCHIVE_PATTERN = f"{ARCHIVE_PREFIX}*.zip"


class BackupService:
    """Writes zip snapshots of the pages directory and prunes old ones."""

    def __init__(self, pages_root: str | Path, backup_dir: str | Path, retention: int = 10) -> None:
        """Initialize BackupService.

        Args:
            pages_root: Directory to snapshot
            backup_dir: Directory the archives are written to; created on first snapshot
            retention: Number of most recent archives to keep
        """
        self.pages_root = Path(pages_root)
        self.backup_dir = Path(backup_dir)
        self.retention = max(1, retention)

    def create_snapshot(self) -> Path:
        """Zip every file below the pages directory and apply retention.

        Returns:
            Path of the new archive
        """
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        archive = self.backup_dir / f"{ARCHIVE_PREFIX}{stamp}.zip"

        backup_root = self.backup_dir.resolve()
        count = 0
        with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
            for path in sorted(self.pages_root.rglob("*")):
                if not path.is_file():
                    continue
                # The backup directory may live inside the pages directory.
                if backup_root in path.resolve().parents:
                    continue
                zf.write(path, path.relative_to(self.pages_root).as_posix())
                count += 1

        logger.info(f"Backup written to {archive} ({count} files)")
        self.enforce_retention()
        return archive

    def archives(self) -> list[Path]:
        """Existing archives, newest first."""
        if not self.backup_dir.is_dir():
            return []
        found = []
        for path in self.backup_dir.glob(ARCHIVE_PATTERN):
            try:
                found.append((path.stat().st_mtime, path.name, path))
            except OSError as e:
                logger.warning(f"Could not stat backup {path}: {e}")
        found.sort(reverse=True)
        return [path for _, _, path in found]

    def enforce_retention(self) -> list[Path]:
        """Delete all but the newest archives.

        Returns:
            Archives that were deleted
        """
        deleted = []
        for path in self.archives()[self.retention :]:
            try:
                path.unlink()
                deleted.append(path)
            except OSError as e:
                logger.warning(f"Could not delete old backup {path}: {e}")
        if deleted:
            logger.info(f"Removed {len(deleted)} old backups from {self.backup_dir}")
        return deleted

    def run_safely(self) -> None:
        """Snapshot for use as a background task; failures are only logged."""
        try:
            self.create_snapshot()
        except Exception:
            logger.exception("Backup failed")
