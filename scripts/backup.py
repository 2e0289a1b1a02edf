"""CLI for writing a zip snapshot of the pages directory and pruning old snapshots"""

import argparse

from nodepad.backup import BackupService
from nodepad.config import settings
from nodepad.logging_config import configure_logging


def main(pages_directory: str, backup_directory: str, retention: int) -> None:
    configure_logging(settings.log_level, settings.log_directory)
    backup_service = BackupService(pages_directory, backup_directory, retention=retention)
    backup_service.create_snapshot()


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--pages-directory",
        type=str,
        required=False,
        help="Folder containing the pages",
        default=str(settings.pages_directory),
    )
    parser.add_argument(
        "--backup-directory",
        type=str,
        required=False,
        help="Folder the zip archives are written to",
        default=str(settings.backup_directory or "Backups"),
    )
    parser.add_argument(
        "--retention",
        type=int,
        required=False,
        help="Number of most recent archives to keep",
        default=settings.backup_retention,
    )

    args = parser.parse_args()

    main(
        pages_directory=args.pages_directory,
        backup_directory=args.backup_directory,
        retention=args.retention,
    )
