"""Search and tag aggregation models."""

from nodepad.domain.base import ApiModel


class HighlightSpan(ApiModel):
    start: int
    length: int


class SearchResult(ApiModel):
    """A ranked search hit.

    Attributes:
        path: Page path relative to the pages directory
        title: Page title (first level-one heading or file stem)
        score: Additive relevance score, higher is better
        snippet: Text excerpt around the first content match, or a one line
            description of where the match was found
        highlights: Positions of the query inside the snippet
    """

    path: str
    title: str
    score: int
    snippet: str
    highlights: list[HighlightSpan] = []


class TagCount(ApiModel):
    tag: str
    count: int


class TagIndex(ApiModel):
    """Normalized tags per page path plus how many pages carry each tag."""

    paths: dict[str, list[str]] = {}
    counts: dict[str, int] = {}
