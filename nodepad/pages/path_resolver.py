"""Mapping of user supplied relative paths onto the pages directory."""

import os
from pathlib import Path
from typing import Optional

from loguru import logger

from nodepad.config import Workspace


class PathResolver:
    """Resolve untrusted relative paths into canonical paths inside the workspace."""

    def __init__(self, workspace: Workspace):
        """
        Initialize PathResolver.

        Args:
            workspace: Pages directory and naming rules the paths are resolved against
        """
        self.workspace = workspace
        self._root = str(workspace.root)

    @staticmethod
    def sanitize(user_path: Optional[str]) -> str:
        """Remove every ".." sequence and turn backslashes into forward slashes.

        This is a blind textual strip, not a segment parser: "a..b" becomes "ab".
        """
        return (user_path or "").replace("..", "").replace("\\", "/")

    def resolve_folder(self, user_path: Optional[str]) -> Optional[Path]:
        """
        Resolve a path without any extension requirement.

        Args:
            user_path: Relative path as received from the client

        Returns:
            Canonical absolute path if it stays inside the pages directory, None otherwise
        """
        cleaned = self.sanitize(user_path)
        logger.debug(f"Resolving {user_path!r} as {cleaned!r}")
        try:
            candidate = (self.workspace.root / cleaned).resolve()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not canonicalize {user_path!r}: {e}")
            return None

        contained = self._rebase(candidate)
        if contained is None:
            logger.warning(f"Rejected path outside pages directory: {user_path!r} -> {candidate}")
        return contained

    def resolve_document(self, user_path: Optional[str]) -> Optional[Path]:
        """Resolve a path that must name a page (document extension required)."""
        candidate = self.resolve_folder(user_path)
        if candidate is None:
            return None
        if not self.workspace.is_document(candidate):
            logger.warning(f"Rejected path without {self.workspace.document_extension}: {user_path!r}")
            return None
        return candidate

    def is_contained(self, path: Path) -> bool:
        """Case-insensitive textual check that an absolute path lies at or below the root."""
        candidate = str(path).lower()
        root = self._root.lower()
        return candidate == root or candidate.startswith(root.rstrip(os.sep) + os.sep)

    def contain(self, path: Path) -> Optional[Path]:
        """Canonicalize a path built by concatenation and re-check containment."""
        try:
            candidate = path.resolve()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not canonicalize {path}: {e}")
            return None
        return self._rebase(candidate)

    def _rebase(self, path: Path) -> Optional[Path]:
        """Return the path spelled under the canonical root, or None if it lies outside.

        A case-insensitive match only counts when the matched prefix is the root
        directory itself, so a sibling differing only in case on a case-sensitive
        filesystem is rejected.
        """
        if path.is_relative_to(self.workspace.root):
            return path
        if not self.is_contained(path):
            return None
        text = str(path)
        prefix = text[: len(self._root)]
        try:
            same_directory = os.path.samefile(prefix, self._root)
        except OSError:
            same_directory = False
        if not same_directory:
            return None
        return self.workspace.root / text[len(self._root) :].lstrip(os.sep)
