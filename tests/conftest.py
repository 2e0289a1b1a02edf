import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from nodepad.api import create_app
from nodepad.config import Workspace
from nodepad.pages import (
    ContentStore,
    EntityMutator,
    NameValidator,
    PathResolver,
    SearchEngine,
    TagStore,
    TreeBuilder,
)
from tests.fakes import FakeBackupService


@pytest.fixture
def temp_base() -> Generator[Path, None, None]:
    """Temporary directory holding the pages and backup folders."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def pages_directory(temp_base: Path) -> Path:
    pages_dir = temp_base / "Pages"
    pages_dir.mkdir()
    return pages_dir


@pytest.fixture
def workspace(pages_directory: Path) -> Workspace:
    return Workspace.create(pages_directory)


@pytest.fixture
def resolver(workspace: Workspace) -> PathResolver:
    return PathResolver(workspace)


@pytest.fixture
def tag_store(workspace: Workspace) -> TagStore:
    return TagStore(workspace)


@pytest.fixture
def tree_builder(workspace: Workspace) -> TreeBuilder:
    return TreeBuilder(workspace)


@pytest.fixture
def content_store(workspace: Workspace) -> ContentStore:
    return ContentStore(workspace)


@pytest.fixture
def mutator(workspace: Workspace) -> EntityMutator:
    return EntityMutator(workspace)


@pytest.fixture
def name_validator(workspace: Workspace) -> NameValidator:
    return NameValidator(workspace)


@pytest.fixture
def search_engine(workspace: Workspace) -> SearchEngine:
    return SearchEngine(workspace)


@pytest.fixture
def sample_pages(workspace: Workspace) -> Path:
    """A small tree of pages with tags.

    Pages/
        index.md            # Welcome            tags: Home
        Projects/
            alpha.md        # Project Alpha      tags: work, Python
            beta.md         (no heading)         tags: work
            Archive/
                old.md      # Old Stuff
        journal/
            day1.md         # Day One            tags: personal
        .hidden/
            secret.md
        notes.txt
    """
    root = workspace.root
    (root / "Projects" / "Archive").mkdir(parents=True)
    (root / "journal").mkdir()
    (root / ".hidden").mkdir()

    (root / "index.md").write_text("# Welcome\n\nStart here.", encoding="utf-8")
    (root / "index.tags").write_text("Home", encoding="utf-8")
    (root / "Projects" / "alpha.md").write_text("# Project Alpha\n\nAlpha notes.", encoding="utf-8")
    (root / "Projects" / "alpha.tags").write_text("work, Python", encoding="utf-8")
    (root / "Projects" / "beta.md").write_text("Just some text.", encoding="utf-8")
    (root / "Projects" / "beta.tags").write_text("work", encoding="utf-8")
    (root / "Projects" / "Archive" / "old.md").write_text("# Old Stuff\n", encoding="utf-8")
    (root / "journal" / "day1.md").write_text("# Day One\n\nDear diary.", encoding="utf-8")
    (root / "journal" / "day1.tags").write_text("personal", encoding="utf-8")
    (root / ".hidden" / "secret.md").write_text("# Secret\n", encoding="utf-8")
    (root / "notes.txt").write_text("not a page", encoding="utf-8")
    return root


@pytest.fixture
def fake_backup_service() -> FakeBackupService:
    return FakeBackupService()


@pytest.fixture
def test_client(workspace: Workspace, fake_backup_service: FakeBackupService) -> TestClient:
    """Create test client backed by a temporary pages directory."""
    app = create_app(workspace=workspace, backup_service=fake_backup_service)
    return TestClient(app)
