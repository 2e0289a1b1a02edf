"""Page and folder domain models."""

from typing import Literal, Optional

from nodepad.domain.base import ApiModel


class TreeEntry(ApiModel):
    """A page or folder in the pages tree.

    Attributes:
        name: Display name (file name for pages, folder name for folders)
        path: Path relative to the pages directory, slash separated
        type: "file" for pages, "folder" for folders
        children: Child entries for folders, None for pages
        file_count: Number of pages directly inside a folder (when counts are requested)
        total_file_count: Number of pages anywhere below a folder (when counts are requested)
        title: Page title taken from the first level-one heading (when titles are requested)
    """

    name: str
    path: str
    type: Literal["file", "folder"]
    children: Optional[list["TreeEntry"]] = None
    file_count: Optional[int] = None
    total_file_count: Optional[int] = None
    title: Optional[str] = None

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"


class Breadcrumb(ApiModel):
    name: str
    path: str


class PageContent(ApiModel):
    content: str
    breadcrumbs: list[Breadcrumb]


class PageTags(ApiModel):
    display: list[str]
    normalized: list[str]


class PageSummary(ApiModel):
    """A page as listed by the recent and untagged views."""

    path: str
    name: str
    title: str
    modified: float
    size: int
    tags: list[str] = []
