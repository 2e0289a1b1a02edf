from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nodepad.api.endpoints import get_pages_router
from nodepad.api.settings import get_settings_router
from nodepad.backup import BackupService
from nodepad.config import Workspace
from nodepad.settings_store import SettingsFile


def create_app(
    *,
    workspace: Workspace,
    backup_service: Optional[BackupService] = None,
    settings_file: Optional[SettingsFile] = None,
    allowed_origins: Sequence[str] = ("*",),
    search_max_results: int = 100,
) -> FastAPI:
    """Create FastAPI app."""
    app = FastAPI(title="NodePad")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    app.include_router(
        router=get_pages_router(
            workspace=workspace,
            backup_service=backup_service,
            search_max_results=search_max_results,
        )
    )
    if settings_file is not None:
        app.include_router(router=get_settings_router(settings_file))

    return app
