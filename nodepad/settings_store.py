import json
from pathlib import Path
from typing import Optional

from loguru import logger

from nodepad.config import Settings
from nodepad.domain.base import ApiModel


class AppSettings(ApiModel):
    allowed_hosts: Optional[str] = None
    pages_directory: Optional[str] = None
    backup_directory: Optional[str] = None


class SettingsFile:
    """The JSON settings file read at startup.

    Updates are written back to the file and take effect on the next start.
    """

    def __init__(self, filepath: str | Path, settings: Settings) -> None:
        self._filepath = Path(filepath)
        self._settings = settings

    def _read(self) -> dict:
        if not self._filepath.exists():
            return {}
        with open(self._filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self._filepath} does not contain a JSON object")
        return data

    def load(self) -> AppSettings:
        """Settings as stored in the file, falling back to the running values."""
        data = self._read()
        backup_directory = data.get("backup_directory", self._settings.backup_directory)
        return AppSettings(
            allowed_hosts=data.get("allowed_hosts", self._settings.allowed_hosts),
            pages_directory=str(data.get("pages_directory", self._settings.pages_directory)),
            backup_directory=str(backup_directory) if backup_directory is not None else None,
        )

    def update(self, changes: AppSettings) -> AppSettings:
        """Merge the provided values into the file and create configured directories."""
        data = self._read()
        updates = changes.model_dump(exclude_none=True)
        data.update(updates)

        self._filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(self._filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        effective = self.load()
        for directory in (effective.pages_directory, effective.backup_directory):
            if directory and directory.strip():
                Path(directory).expanduser().mkdir(parents=True, exist_ok=True)

        logger.info(
            f"Settings updated: allowed_hosts={effective.allowed_hosts}, "
            f"pages_directory={effective.pages_directory}, "
            f"backup_directory={effective.backup_directory}"
        )
        return effective
