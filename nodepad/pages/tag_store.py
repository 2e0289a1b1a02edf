"""Sidecar tag files stored next to each page."""

import re
from pathlib import Path
from typing import Iterable

from loguru import logger

from nodepad.config import Workspace
from nodepad.domain.search import TagIndex

from .fileio import write_text_atomic

_WHITESPACE = re.compile(r"\s+")


def normalize_tag(tag: str) -> str:
    """Lowercase, collapse runs of whitespace to one space, trim."""
    return _WHITESPACE.sub(" ", tag).strip().lower()


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Normalize and deduplicate tags, keeping first-seen order."""
    normalized: list[str] = []
    for tag in tags:
        key = normalize_tag(tag)
        if key and key not in normalized:
            normalized.append(key)
    return normalized


def parse_tags_csv(tags_csv: str | None) -> list[str]:
    """Split a comma separated tag string into trimmed, non-empty pieces."""
    if not tags_csv:
        return []
    return [piece.strip() for piece in tags_csv.split(",") if piece.strip()]


class TagStore:
    """Reads and writes the tags sidecar of a page."""

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def sidecar_path(self, document: Path) -> Path:
        return self.workspace.sidecar_for(document)

    def read(self, document: Path) -> list[str]:
        """Get the display tags of a page.

        Never raises: a missing or unreadable sidecar yields an empty list.
        """
        sidecar = self.sidecar_path(document)
        if not sidecar.is_file():
            return []
        try:
            raw = sidecar.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read tags from {sidecar}: {e}")
            return []
        return parse_tags_csv(raw)

    def read_normalized(self, document: Path) -> list[str]:
        return normalize_tags(self.read(document))

    def write(self, document: Path, tags: Iterable[str]) -> list[str]:
        """Replace the tags of a page.

        Tags are trimmed and deduplicated case-insensitively; the first spelling wins.

        Returns:
            The display tags that were written
        """
        display: list[str] = []
        seen: set[str] = set()
        for tag in tags:
            cleaned = (tag or "").strip()
            key = normalize_tag(cleaned)
            if not key or key in seen:
                continue
            seen.add(key)
            display.append(cleaned)

        write_text_atomic(self.sidecar_path(document), ", ".join(display))
        logger.debug(f"Wrote {len(display)} tags for {document}")
        return display

    def build_index(self, documents: Iterable[Path]) -> TagIndex:
        """Aggregate normalized tags for the given pages.

        Args:
            documents: Absolute page paths inside the workspace

        Returns:
            TagIndex with a path to tags mapping and a tag to page count mapping
        """
        index = TagIndex()
        for document in documents:
            tags = self.read_normalized(document)
            index.paths[self.workspace.relative(document)] = tags
            for tag in tags:
                index.counts[tag] = index.counts.get(tag, 0) + 1
        return index
