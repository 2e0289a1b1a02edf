import os
import zipfile
from pathlib import Path

import pytest

from nodepad.backup import BackupService


@pytest.fixture
def backup_service(sample_pages: Path, temp_base: Path) -> BackupService:
    return BackupService(pages_root=sample_pages, backup_dir=temp_base / "Backups", retention=10)


def test_snapshot_contains_every_file(backup_service: BackupService) -> None:
    archive = backup_service.create_snapshot()

    assert archive.parent == backup_service.backup_dir
    assert archive.name.startswith("pages-")
    with zipfile.ZipFile(archive) as zf:
        names = set(zf.namelist())
        assert "index.md" in names
        assert "index.tags" in names
        assert "Projects/Archive/old.md" in names
        assert ".hidden/secret.md" in names
        assert zf.read("Projects/alpha.md").decode("utf-8").startswith("# Project Alpha")


def test_snapshot_skips_nested_backup_directory(sample_pages: Path) -> None:
    service = BackupService(pages_root=sample_pages, backup_dir=sample_pages / "_backups")

    service.create_snapshot()
    archive = service.create_snapshot()

    with zipfile.ZipFile(archive) as zf:
        assert not any(name.startswith("_backups/") for name in zf.namelist())


def test_retention_keeps_newest_archives(temp_base: Path) -> None:
    backup_dir = temp_base / "Backups"
    backup_dir.mkdir()
    for i in range(15):
        archive = backup_dir / f"pages-{i:02d}.zip"
        archive.write_bytes(b"")
        os.utime(archive, (1_000_000 + i * 60, 1_000_000 + i * 60))
    (backup_dir / "unrelated.txt").write_text("keep me")

    service = BackupService(pages_root=temp_base, backup_dir=backup_dir, retention=10)
    deleted = service.enforce_retention()

    assert sorted(path.name for path in deleted) == [f"pages-{i:02d}.zip" for i in range(5)]
    assert [path.name for path in service.archives()] == [
        f"pages-{i:02d}.zip" for i in range(14, 4, -1)
    ]
    assert (backup_dir / "unrelated.txt").exists()


def test_snapshot_applies_retention(sample_pages: Path, temp_base: Path) -> None:
    service = BackupService(pages_root=sample_pages, backup_dir=temp_base / "Backups", retention=2)

    for _ in range(3):
        service.create_snapshot()

    assert len(service.archives()) == 2


def test_archives_of_missing_directory(temp_base: Path) -> None:
    service = BackupService(pages_root=temp_base, backup_dir=temp_base / "none")
    assert service.archives() == []
    assert service.enforce_retention() == []


def test_run_safely_swallows_failures(
    backup_service: BackupService, monkeypatch: pytest.MonkeyPatch
) -> None:
    def explode() -> Path:
        raise OSError("disk full")

    monkeypatch.setattr(backup_service, "create_snapshot", explode)

    backup_service.run_safely()
