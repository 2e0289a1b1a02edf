from loguru import logger

from nodepad.api import create_app
from nodepad.backup import BackupService
from nodepad.config import SETTINGS_FILE, Workspace, settings
from nodepad.logging_config import configure_logging
from nodepad.settings_store import SettingsFile

configure_logging(settings.log_level, settings.log_directory)

workspace = Workspace.from_settings(settings)
logger.info(f"Serving pages from {workspace.root}")

backup_service = None
if settings.backup_directory is not None:
    backup_service = BackupService(
        workspace.root, settings.backup_directory, retention=settings.backup_retention
    )
    logger.info(f"Backups go to {settings.backup_directory} (keeping {settings.backup_retention})")

app = create_app(
    workspace=workspace,
    backup_service=backup_service,
    settings_file=SettingsFile(SETTINGS_FILE, settings),
    allowed_origins=[host.strip() for host in settings.allowed_hosts.split(",") if host.strip()],
    search_max_results=settings.search_max_results,
)
