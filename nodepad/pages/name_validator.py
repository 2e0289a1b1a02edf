"""Pre-flight checks of names proposed for new pages and folders."""

import re
from pathlib import Path
from typing import Optional

from loguru import logger

from nodepad.config import Workspace
from nodepad.domain.outcomes import ValidationOutcome

from .mutator import FILE_TYPES, FOLDER_TYPES
from .path_resolver import PathResolver

MAX_SUGGESTION_ATTEMPTS = 1000

_INVALID_CHARACTERS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def sanitize_name(name: str) -> str:
    """Make a name safe to use as a file or folder name on any filesystem."""
    cleaned = _INVALID_CHARACTERS.sub("-", name)
    cleaned = _WHITESPACE.sub("-", cleaned)
    cleaned = _REPEATED_HYPHENS.sub("-", cleaned)
    return cleaned.strip("-")


class NameValidator:
    """Validates a proposed name and suggests a usable alternative.

    Never raises; every problem is reported through a ValidationOutcome.
    """

    def __init__(self, workspace: Workspace, *, resolver: Optional[PathResolver] = None) -> None:
        self.workspace = workspace
        self.resolver = resolver or PathResolver(workspace)

    def validate(
        self, parent_path: Optional[str], entity_type: Optional[str], name: Optional[str]
    ) -> ValidationOutcome:
        entity_type = (entity_type or "").strip().lower()
        name = name or ""
        if not entity_type or not name.strip():
            return ValidationOutcome.rejected("Type and name are required")
        if entity_type not in FILE_TYPES | FOLDER_TYPES:
            return ValidationOutcome.rejected(f"Unsupported type: {entity_type}")
        if "/" in name or "\\" in name:
            return ValidationOutcome.rejected("Name must not contain path separators")

        parent = self.resolver.resolve_folder(parent_path or "")
        if parent is None:
            return ValidationOutcome.rejected("Parent folder is outside the pages directory")
        if not parent.is_dir():
            return ValidationOutcome.rejected("Parent folder does not exist")

        sanitized = sanitize_name(name)
        extension = self.workspace.document_extension
        is_file = entity_type in FILE_TYPES

        base = sanitized
        if base.lower().endswith(extension.lower()):
            base = base[: -len(extension)]
        if not base.strip("."):
            return ValidationOutcome.rejected("Name contains no usable characters")
        # Folders never carry the page extension, pages always do.
        candidate = base + extension if is_file else base

        if (parent / candidate).exists():
            suggestion = self._unique_name(parent, base, extension if is_file else "")
            logger.debug(f"Name {candidate!r} is taken in {parent}, suggesting {suggestion!r}")
            return ValidationOutcome.rejected(
                "A file or folder with that name already exists", suggestion
            )

        if candidate != name:
            return ValidationOutcome.accepted(candidate)
        return ValidationOutcome.accepted()

    @staticmethod
    def _unique_name(parent: Path, base: str, extension: str) -> str:
        candidate = f"{base}{extension}"
        for counter in range(2, MAX_SUGGESTION_ATTEMPTS + 2):
            candidate = f"{base}-{counter}{extension}"
            if not (parent / candidate).exists():
                return candidate
        return candidate
