from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

SETTINGS_FILE = Path("nodepad.json")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NODEPAD_",
        json_file=SETTINGS_FILE,
        json_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage settings
    pages_directory: Path = Path("Pages")
    backup_directory: Optional[Path] = Path("Backups")
    backup_retention: int = 10

    # Document settings
    document_extension: str = ".md"
    tags_extension: str = ".tags"
    search_max_results: int = 100

    # Web server settings
    allowed_hosts: str = "*"

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_directory: Optional[Path] = None

    @field_validator("backup_directory", "log_directory", mode="before")
    @classmethod
    def empty_path_disables(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class Workspace(BaseModel):
    """The sandboxed pages directory and the file naming rules that apply to it.

    Attributes:
        root: Canonical absolute path of the pages directory.
        document_extension: Extension marking a file as a page (e.g. ".md").
        tags_extension: Extension of the sidecar file holding a page's tags.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    document_extension: str = ".md"
    tags_extension: str = ".tags"

    @classmethod
    def create(
        cls,
        root: str | Path,
        *,
        document_extension: str = ".md",
        tags_extension: str = ".tags",
    ) -> "Workspace":
        """Create the pages directory if needed and pin its canonical path."""
        path = Path(root).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return cls(
            root=path.resolve(),
            document_extension=document_extension,
            tags_extension=tags_extension,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Workspace":
        return cls.create(
            settings.pages_directory,
            document_extension=settings.document_extension,
            tags_extension=settings.tags_extension,
        )

    def relative(self, path: Path) -> str:
        """Path relative to the root, slash separated, without a leading slash."""
        relative = path.relative_to(self.root).as_posix()
        return "" if relative == "." else relative.lstrip("/")

    def is_document(self, path: Path) -> bool:
        return path.name.lower().endswith(self.document_extension.lower())

    def sidecar_for(self, document: Path) -> Path:
        """Tags file living next to a page, sharing its stem."""
        return document.with_suffix(self.tags_extension)


settings = Settings()
