"""Endpoints for reading and updating the settings file"""

from fastapi import APIRouter, HTTPException
from loguru import logger

from nodepad.settings_store import AppSettings, SettingsFile


def get_settings_router(settings_file: SettingsFile) -> APIRouter:
    router = APIRouter(prefix="/api/settings")

    @router.get("")
    def get_settings() -> AppSettings:
        try:
            return settings_file.load()
        except (OSError, ValueError) as e:
            logger.error(f"Error reading settings: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to read settings") from e

    @router.post("")
    def save_settings(changes: AppSettings) -> AppSettings:
        try:
            return settings_file.update(changes)
        except (OSError, ValueError) as e:
            logger.error(f"Error saving settings: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to save settings") from e

    return router
