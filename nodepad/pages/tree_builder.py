"""Walks the pages directory into a tree of pages and folders."""

import os
import stat
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from nodepad.config import Workspace
from nodepad.domain.page import TreeEntry

# Windows exposes hidden/system attributes through st_file_attributes, macOS
# and BSD through the UF_HIDDEN flag.
_HIDDEN_ATTRIBUTES = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0x2) | getattr(
    stat, "FILE_ATTRIBUTE_SYSTEM", 0x4
)
_HIDDEN_FLAGS = getattr(stat, "UF_HIDDEN", 0)


def is_hidden_directory(directory: Path) -> bool:
    """True for folders that must never show up in the tree.

    A folder is hidden when its name is empty or starts with a dot, or when the
    filesystem marks it hidden/system. If attributes cannot be read the folder
    is shown.
    """
    name = directory.name
    if not name or name.startswith("."):
        return True
    try:
        st = directory.stat()
    except OSError as e:
        logger.debug(f"Could not read attributes of {directory}: {e}")
        return False
    if getattr(st, "st_file_attributes", 0) & _HIDDEN_ATTRIBUTES:
        return True
    if _HIDDEN_FLAGS and getattr(st, "st_flags", 0) & _HIDDEN_FLAGS:
        return True
    return False


class TreeBuilder:
    """Builds the raw (unsorted) tree of pages and folders."""

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def build(self, directory: Optional[Path] = None) -> list[TreeEntry]:
        """Build the tree below a directory.

        Pages of a level come first, then its folders, each in discovery order.

        Args:
            directory: Directory to walk; defaults to the pages root

        Returns:
            List of entries with recursively built children for folders
        """
        directory = directory or self.workspace.root
        files, folders = self._scan(directory)

        entries = [
            TreeEntry(name=f.name, path=self.workspace.relative(f), type="file") for f in files
        ]
        entries.extend(
            TreeEntry(
                name=d.name,
                path=self.workspace.relative(d),
                type="folder",
                children=self.build(d),
            )
            for d in folders
        )
        return entries

    def iter_documents(self, directory: Optional[Path] = None) -> Iterator[Path]:
        """Yield the absolute path of every visible page below a directory."""
        directory = directory or self.workspace.root
        files, folders = self._scan(directory)
        yield from files
        for folder in folders:
            yield from self.iter_documents(folder)

    def _scan(self, directory: Path) -> tuple[list[Path], list[Path]]:
        files: list[Path] = []
        folders: list[Path] = []
        try:
            with os.scandir(directory) as it:
                for entry in it:
                    path = Path(entry.path)
                    if entry.is_dir(follow_symlinks=False):
                        if not is_hidden_directory(path):
                            folders.append(path)
                    elif entry.is_file() and self.workspace.is_document(path):
                        files.append(path)
        except OSError as e:
            logger.warning(f"Could not list {directory}: {e}")
        return files, folders
