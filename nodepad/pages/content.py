"""Reading and saving page content, tags and breadcrumbs."""

from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

from loguru import logger

from nodepad.config import Workspace
from nodepad.domain.page import Breadcrumb, PageContent, PageTags
from nodepad.errors import ForbiddenError, InvalidInputError, NotFoundError

from .fileio import write_text_atomic
from .path_resolver import PathResolver
from .tag_store import TagStore, normalize_tags


class ContentStore:
    """Page content and tag access for single pages."""

    def __init__(
        self,
        workspace: Workspace,
        *,
        resolver: Optional[PathResolver] = None,
        tag_store: Optional[TagStore] = None,
    ) -> None:
        self.workspace = workspace
        self.resolver = resolver or PathResolver(workspace)
        self.tag_store = tag_store or TagStore(workspace)

    def resolve(self, path: Optional[str]) -> Path:
        """Resolve a page path or raise the matching error."""
        if not (path or "").strip():
            raise InvalidInputError("Path is required")
        document = self.resolver.resolve_folder(path)
        if document is None:
            raise ForbiddenError("Path is outside the pages directory")
        if not self.workspace.is_document(document):
            raise InvalidInputError(
                f"Pages must use the {self.workspace.document_extension} extension"
            )
        return document

    def read(self, path: Optional[str]) -> str:
        document = self.resolve(path)
        if not document.is_file():
            raise NotFoundError(f"Page not found: {path}")
        try:
            with open(document, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except UnicodeDecodeError as e:
            logger.warning(f"Page {path} is not valid UTF-8: {e}")
            raise InvalidInputError("Page is not valid UTF-8 text") from e

    def read_with_meta(self, path: Optional[str]) -> PageContent:
        return PageContent(content=self.read(path), breadcrumbs=self.breadcrumbs(path))

    def save(self, path: Optional[str], content: str, tags: Optional[Iterable[str]] = None) -> str:
        """Write page content, creating missing folders.

        Args:
            path: Relative page path
            content: New content, stored exactly as given
            tags: Replacement tags; None leaves the current tags untouched

        Returns:
            The saved content
        """
        document = self.resolve(path)
        write_text_atomic(document, content)
        if tags is not None:
            self.tag_store.write(document, tags)
        logger.info(f"Saved {self.workspace.relative(document)} ({len(content)} chars)")
        return content

    def read_tags(self, path: Optional[str]) -> PageTags:
        document = self.resolve(path)
        display = self.tag_store.read(document)
        return PageTags(display=display, normalized=normalize_tags(display))

    def breadcrumbs(self, path: Optional[str]) -> list[Breadcrumb]:
        """Ancestor folders of a page followed by the page itself."""
        relative = PurePosixPath(self.workspace.relative(self.resolve(path)))
        crumbs = []
        current = PurePosixPath()
        for part in relative.parts[:-1]:
            current = current / part
            crumbs.append(Breadcrumb(name=part, path=current.as_posix()))
        crumbs.append(Breadcrumb(name=relative.stem, path=relative.as_posix()))
        return crumbs
