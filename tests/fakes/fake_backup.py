from nodepad.backup import BackupService


class FakeBackupService(BackupService):
    """Backup service that only counts how often it was triggered."""

    def __init__(self) -> None:
        super().__init__(pages_root=".", backup_dir=".", retention=10)
        self.runs = 0

    def run_safely(self) -> None:
        self.runs += 1
