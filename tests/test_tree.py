"""Tests for building and post-processing the pages tree."""

from pathlib import Path

from nodepad.config import Workspace
from nodepad.domain.page import TreeEntry
from nodepad.pages.titles import extract_title
from nodepad.pages.tree_builder import TreeBuilder, is_hidden_directory
from nodepad.pages.tree_view import attach_counts, attach_titles, filter_by_tags, sort_tree


def _find(entries: list[TreeEntry], name: str) -> TreeEntry:
    return next(entry for entry in entries if entry.name == name)


def test_build_lists_pages_before_folders(tree_builder: TreeBuilder, sample_pages: Path) -> None:  # noqa: ARG001
    tree = tree_builder.build()

    types = [entry.type for entry in tree]
    assert types == ["file", "folder", "folder"]
    assert {entry.name for entry in tree} == {"index.md", "Projects", "journal"}


def test_build_skips_hidden_folders_and_other_files(
    tree_builder: TreeBuilder,
    sample_pages: Path,  # noqa: ARG001
) -> None:
    tree = tree_builder.build()

    names = {entry.name for entry in tree}
    assert ".hidden" not in names
    assert "notes.txt" not in names
    assert "index.tags" not in names


def test_build_uses_relative_slash_paths(tree_builder: TreeBuilder, sample_pages: Path) -> None:  # noqa: ARG001
    tree = tree_builder.build()

    projects = _find(tree, "Projects")
    assert projects.path == "Projects"
    assert projects.children is not None
    archive = _find(projects.children, "Archive")
    assert archive.path == "Projects/Archive"
    assert archive.children == [
        TreeEntry(name="old.md", path="Projects/Archive/old.md", type="file")
    ]
    assert _find(tree, "index.md").children is None


def test_iter_documents_skips_hidden(tree_builder: TreeBuilder, sample_pages: Path) -> None:
    found = {path.relative_to(sample_pages).as_posix() for path in tree_builder.iter_documents()}
    assert found == {
        "index.md",
        "Projects/alpha.md",
        "Projects/beta.md",
        "Projects/Archive/old.md",
        "journal/day1.md",
    }


def test_is_hidden_directory(workspace: Workspace) -> None:
    assert is_hidden_directory(workspace.root / ".git")
    assert not is_hidden_directory(workspace.root / "visible")
    # Attributes of a missing folder cannot be read; it is not treated as hidden.
    assert not is_hidden_directory(workspace.root / "missing")


def test_sort_tree_directories_first() -> None:
    tree = [
        TreeEntry(name="b.md", path="b.md", type="file"),
        TreeEntry(name="Zeta", path="Zeta", type="folder", children=[]),
        TreeEntry(name="A.md", path="A.md", type="file"),
        TreeEntry(
            name="alpha",
            path="alpha",
            type="folder",
            children=[
                TreeEntry(name="y.md", path="alpha/y.md", type="file"),
                TreeEntry(name="X.md", path="alpha/X.md", type="file"),
            ],
        ),
    ]

    result = sort_tree(tree, directories_first=True)

    assert [entry.name for entry in result] == ["alpha", "Zeta", "A.md", "b.md"]
    assert [child.name for child in result[0].children] == ["X.md", "y.md"]
    # Input is left untouched.
    assert [entry.name for entry in tree] == ["b.md", "Zeta", "A.md", "alpha"]


def test_sort_tree_by_name_only() -> None:
    tree = [
        TreeEntry(name="b.md", path="b.md", type="file"),
        TreeEntry(name="Zeta", path="Zeta", type="folder", children=[]),
        TreeEntry(name="A.md", path="A.md", type="file"),
    ]

    result = sort_tree(tree, directories_first=False)

    assert [entry.name for entry in result] == ["A.md", "b.md", "Zeta"]


def test_attach_counts(tree_builder: TreeBuilder, sample_pages: Path) -> None:  # noqa: ARG001
    tree, total = attach_counts(tree_builder.build())

    assert total == 5
    projects = _find(tree, "Projects")
    assert projects.file_count == 2
    assert projects.total_file_count == 3
    archive = _find(projects.children, "Archive")
    assert archive.file_count == 1
    assert archive.total_file_count == 1
    assert _find(tree, "index.md").file_count is None


def test_attach_titles(tree_builder: TreeBuilder, sample_pages: Path) -> None:
    tree = attach_titles(tree_builder.build(), sample_pages)

    assert _find(tree, "index.md").title == "Welcome"
    projects = _find(tree, "Projects")
    assert projects.title is None
    assert _find(projects.children, "alpha.md").title == "Project Alpha"
    # No heading: falls back to the file stem.
    assert _find(projects.children, "beta.md").title == "beta"


def test_filter_by_tags(tree_builder: TreeBuilder, search_engine, sample_pages: Path) -> None:  # noqa: ARG001
    index = search_engine.tag_index().paths

    tree = filter_by_tags(tree_builder.build(), ["Work"], index)

    assert [entry.name for entry in tree] == ["Projects"]
    projects = tree[0]
    assert {child.name for child in projects.children} == {"alpha.md", "beta.md"}


def test_filter_by_tags_requires_every_tag(
    tree_builder: TreeBuilder,
    search_engine,
    sample_pages: Path,  # noqa: ARG001
) -> None:
    index = search_engine.tag_index().paths

    tree = filter_by_tags(tree_builder.build(), ["work", "python"], index)

    assert len(tree) == 1
    assert [child.name for child in tree[0].children] == ["alpha.md"]
    assert filter_by_tags(tree_builder.build(), ["nothing"], index) == []


def test_passes_compose(tree_builder: TreeBuilder, sample_pages: Path) -> None:
    tree = sort_tree(tree_builder.build())
    tree, _ = attach_counts(tree)
    tree = attach_titles(tree, sample_pages)

    assert [entry.name for entry in tree] == ["journal", "Projects", "index.md"]
    assert tree[0].total_file_count == 1
    assert tree[0].children[0].title == "Day One"


def test_extract_title() -> None:
    assert extract_title("# Hello World\n\nBody", "fallback") == "Hello World"
    assert extract_title("\r\n\n   #   Spaced  \n", "fallback") == "Spaced"
    assert extract_title("## Second level\n# First", "fallback") == "First"
    assert extract_title("#NoSpace\nplain", "fallback") == "fallback"
    assert extract_title("", "fallback") == "fallback"
    assert extract_title(None, "") == "Untitled"
