"""Pure post-processing passes over a built tree.

Every function returns new entries and leaves its input untouched, so the
passes can be chained in any order.
"""

from pathlib import Path
from typing import Iterable, Mapping

from loguru import logger

from nodepad.domain.page import TreeEntry

from .tag_store import normalize_tags
from .titles import extract_title


def filter_by_tags(
    entries: list[TreeEntry],
    required_tags: Iterable[str],
    tag_index: Mapping[str, Iterable[str]],
) -> list[TreeEntry]:
    """Keep pages carrying every required tag and folders that still hold something.

    Args:
        entries: Tree to filter
        required_tags: Tags a page must have; compared in normalized form
        tag_index: Normalized tags per page path

    Returns:
        Filtered copy of the tree
    """
    required = set(normalize_tags(required_tags))
    if not required:
        return [entry.model_copy(deep=True) for entry in entries]

    kept: list[TreeEntry] = []
    for entry in entries:
        if entry.is_folder:
            children = filter_by_tags(entry.children or [], required, tag_index)
            if children:
                kept.append(entry.model_copy(update={"children": children}))
        elif required.issubset(set(tag_index.get(entry.path, []))):
            kept.append(entry.model_copy())
    return kept


def sort_tree(entries: list[TreeEntry], directories_first: bool = True) -> list[TreeEntry]:
    """Recursively sort by name (case-insensitive), optionally folders before pages."""

    def sort_key(entry: TreeEntry) -> tuple[int, str]:
        group = 0 if (entry.is_folder or not directories_first) else 1
        return group, entry.name.lower()

    return [
        entry.model_copy(
            update={"children": sort_tree(entry.children or [], directories_first)}
        )
        if entry.is_folder
        else entry.model_copy()
        for entry in sorted(entries, key=sort_key)
    ]


def attach_counts(entries: list[TreeEntry]) -> tuple[list[TreeEntry], int]:
    """Annotate folders with direct and recursive page counts.

    Returns:
        Tuple of (annotated copy of the tree, number of pages in the whole tree)
    """
    result: list[TreeEntry] = []
    total = 0
    for entry in entries:
        if entry.is_folder:
            children, child_total = attach_counts(entry.children or [])
            direct = sum(1 for child in children if not child.is_folder)
            result.append(
                entry.model_copy(
                    update={
                        "children": children,
                        "file_count": direct,
                        "total_file_count": child_total,
                    }
                )
            )
            total += child_total
        else:
            result.append(entry.model_copy())
            total += 1
    return result, total


def attach_titles(entries: list[TreeEntry], root: Path) -> list[TreeEntry]:
    """Annotate pages with the title read from their content.

    Args:
        entries: Tree to annotate
        root: Pages directory the entry paths are relative to
    """
    result: list[TreeEntry] = []
    for entry in entries:
        if entry.is_folder:
            result.append(
                entry.model_copy(update={"children": attach_titles(entry.children or [], root)})
            )
            continue
        try:
            content = (root / entry.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {entry.path} for its title: {e}")
            content = ""
        result.append(entry.model_copy(update={"title": extract_title(content, Path(entry.name).stem)}))
    return result
