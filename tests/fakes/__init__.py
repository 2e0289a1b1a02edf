from tests.fakes.fake_backup import FakeBackupService

__all__ = ["FakeBackupService"]
