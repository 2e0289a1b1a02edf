"""Full-text and metadata search over all pages, plus aggregate listings."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from nodepad.config import Workspace
from nodepad.domain.page import PageSummary
from nodepad.domain.search import HighlightSpan, SearchResult, TagCount, TagIndex
from nodepad.errors import InvalidInputError

from .tag_store import TagStore, normalize_tag, normalize_tags
from .titles import extract_title
from .tree_builder import TreeBuilder

MIN_QUERY_LENGTH = 2
DEFAULT_LIMIT = 50

NAME_SCORE = 50
PATH_SCORE = 20
TITLE_SCORE = 40
OCCURRENCE_SCORE = 5
MAX_COUNTED_OCCURRENCES = 10
PROXIMITY_BONUS = 30
PROXIMITY_STEP = 50

SNIPPET_LENGTH = 200
SNIPPET_LEAD = 40
ELLIPSIS = "…"


def find_occurrences(text: str, query: str) -> list[int]:
    """Start offsets of every non-overlapping, case-insensitive occurrence."""
    haystack = text.lower()
    needle = query.lower()
    offsets: list[int] = []
    if not needle:
        return offsets
    index = haystack.find(needle)
    while index >= 0:
        offsets.append(index)
        index = haystack.find(needle, index + len(needle))
    return offsets


def build_snippet(content: str, query: str, first_offset: int) -> tuple[str, list[HighlightSpan]]:
    """Cut a snippet around the first match and locate the query inside it."""
    start = max(0, first_offset - SNIPPET_LEAD)
    end = min(len(content), start + SNIPPET_LENGTH)
    raw = content[start:end]

    shift = 1 if start > 0 else 0
    highlights = [
        HighlightSpan(start=offset + shift, length=len(query))
        for offset in find_occurrences(raw, query)
    ]

    snippet = raw.replace("\r", " ").replace("\n", " ")
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(content):
        snippet = snippet + ELLIPSIS
    return snippet, highlights


def _described_match(label: str, value: str, match_in: str, query: str) -> tuple[str, list[HighlightSpan]]:
    prefix = f"Match in {label}: "
    offset = match_in.lower().find(query.lower())
    return prefix + value, [HighlightSpan(start=len(prefix) + offset, length=len(query))]


@dataclass
class _Document:
    path: Path
    relative: str
    name: str
    content: str


class SearchEngine:
    """Ranks pages against a query and serves the read-only aggregate views."""

    def __init__(
        self,
        workspace: Workspace,
        *,
        tree_builder: Optional[TreeBuilder] = None,
        tag_store: Optional[TagStore] = None,
        max_results: int = 100,
    ) -> None:
        self.workspace = workspace
        self.tree_builder = tree_builder or TreeBuilder(workspace)
        self.tag_store = tag_store or TagStore(workspace)
        self.max_results = max_results

    def clamp_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            limit = DEFAULT_LIMIT
        return max(1, min(limit, self.max_results))

    def search(
        self, query: str, required_tags: Iterable[str] = (), limit: Optional[int] = None
    ) -> list[SearchResult]:
        """Search page names, paths, titles and content.

        Args:
            query: Text to look for; at least two characters after trimming
            required_tags: Only pages carrying all of these tags are considered
            limit: Maximum number of results, clamped to the configured maximum

        Returns:
            Results ordered by descending score, then title

        Raises:
            InvalidInputError: If the query is too short
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise InvalidInputError(f"Query must be at least {MIN_QUERY_LENGTH} characters")

        required = normalize_tags(required_tags)
        results = []
        for document in self._candidates(required):
            result = self._score(document, query)
            if result is not None:
                results.append(result)

        results.sort(key=lambda r: (-r.score, r.title.lower()))
        logger.debug(f"Search {query!r} matched {len(results)} pages")
        return results[: self.clamp_limit(limit)]

    def _candidates(self, required: list[str]) -> Iterable[_Document]:
        for path in self.tree_builder.iter_documents():
            if required and not set(required).issubset(self.tag_store.read_normalized(path)):
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable page {path}: {e}")
                continue
            yield _Document(
                path=path,
                relative=self.workspace.relative(path),
                name=path.stem,
                content=content,
            )

    def _score(self, document: _Document, query: str) -> Optional[SearchResult]:
        needle = query.lower()
        title = extract_title(document.content, document.name)

        name_match = needle in document.name.lower()
        path_match = needle in document.relative.lower()
        title_match = needle in title.lower()
        occurrences = find_occurrences(document.content, query)

        if not (name_match or path_match or title_match or occurrences):
            return None

        score = 0
        if name_match:
            score += NAME_SCORE
        if path_match:
            score += PATH_SCORE
        if title_match:
            score += TITLE_SCORE
        if occurrences:
            score += min(len(occurrences), MAX_COUNTED_OCCURRENCES) * OCCURRENCE_SCORE
            score += max(0, PROXIMITY_BONUS - occurrences[0] // PROXIMITY_STEP)

        if occurrences:
            snippet, highlights = build_snippet(document.content, query, occurrences[0])
        elif name_match:
            file_name = document.name + self.workspace.document_extension
            snippet, highlights = _described_match("file name", file_name, document.name, query)
        elif path_match:
            snippet, highlights = _described_match(
                "path", document.relative, document.relative, query
            )
        else:
            snippet, highlights = _described_match("title", title, title, query)

        return SearchResult(
            path=document.relative,
            title=title,
            score=score,
            snippet=snippet,
            highlights=highlights,
        )

    def _summaries(self, required: list[str]) -> list[PageSummary]:
        summaries = []
        for path in self.tree_builder.iter_documents():
            tags = self.tag_store.read_normalized(path)
            if required and not set(required).issubset(tags):
                continue
            try:
                st = path.stat()
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable page {path}: {e}")
                continue
            summaries.append(
                PageSummary(
                    path=self.workspace.relative(path),
                    name=path.stem,
                    title=extract_title(content, path.stem),
                    modified=st.st_mtime,
                    size=st.st_size,
                    tags=tags,
                )
            )
        return summaries

    def recent(self, required_tags: Iterable[str] = (), limit: Optional[int] = None) -> list[PageSummary]:
        """Pages ordered by most recent modification first."""
        summaries = self._summaries(normalize_tags(required_tags))
        summaries.sort(key=lambda s: s.modified, reverse=True)
        return summaries[: self.clamp_limit(limit)]

    def untagged(self) -> list[PageSummary]:
        """Pages without any tag, ordered by title."""
        summaries = [s for s in self._summaries([]) if not s.tags]
        summaries.sort(key=lambda s: s.title.lower())
        return summaries

    def tag_index(self) -> TagIndex:
        return self.tag_store.build_index(self.tree_builder.iter_documents())

    def tag_counts(self) -> list[TagCount]:
        """All tags with the number of pages carrying them, most used first."""
        counts = self.tag_index().counts
        return [
            TagCount(tag=tag, count=count)
            for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        ]

    def suggest_tags(self, prefix: str, limit: Optional[int] = None) -> list[str]:
        """Known tags starting with a prefix, alphabetically."""
        needle = normalize_tag(prefix or "")
        tags = sorted(tag for tag in self.tag_index().counts if tag.startswith(needle))
        return tags[: self.clamp_limit(limit)]
