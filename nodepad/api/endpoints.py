from typing import Callable, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from pydantic import ValidationError

from nodepad.backup import BackupService
from nodepad.config import Workspace
from nodepad.domain.base import ApiModel
from nodepad.domain.outcomes import MutationOutcome, OutcomeKind, ValidationOutcome
from nodepad.domain.page import Breadcrumb, PageContent, PageSummary, PageTags, TreeEntry
from nodepad.domain.search import SearchResult, TagCount, TagIndex
from nodepad.errors import NodePadError
from nodepad.pages import (
    ContentStore,
    EntityMutator,
    NameValidator,
    PathResolver,
    SearchEngine,
    TagStore,
    TreeBuilder,
)
from nodepad.pages.tag_store import parse_tags_csv
from nodepad.pages.tree_view import attach_counts, attach_titles, filter_by_tags, sort_tree

STATUS_CODES = {
    OutcomeKind.OK: 200,
    OutcomeKind.INVALID_INPUT: 400,
    OutcomeKind.FORBIDDEN: 403,
    OutcomeKind.NOT_FOUND: 404,
    OutcomeKind.CONFLICT: 409,
    OutcomeKind.NEEDS_CONFIRMATION: 409,
    OutcomeKind.INTERNAL: 500,
}


class SavePageRequest(ApiModel):
    content: str = ""
    tags: Optional[list[str]] = None


def outcome_response(outcome: MutationOutcome) -> JSONResponse:
    """Serialise a mutation outcome with the status code matching its kind."""
    return JSONResponse(
        status_code=STATUS_CODES[outcome.kind],
        content=outcome.model_dump(mode="json", by_alias=True),
    )


def guarded(action: str, func: Callable):
    """Run a read-side operation, mapping its errors onto HTTP errors."""
    try:
        return func()
    except NodePadError as e:
        logger.warning(f"{action} rejected: {e.message}")
        raise HTTPException(status_code=STATUS_CODES[e.kind], detail=e.message) from e
    except Exception as e:
        logger.error(f"Error in {action}: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error") from e


def _create_structure_endpoint(
    workspace: Workspace, tree_builder: TreeBuilder, search_engine: SearchEngine
):
    """Create the tree listing endpoint handler."""

    def get_structure(
        sort: bool = Query(True, alias="sorted"),
        directories_first: bool = Query(True, alias="directoriesFirst"),
        tags: Optional[str] = None,
        include_counts: bool = Query(False, alias="includeCounts"),
        include_titles: bool = Query(False, alias="includeTitles"),
    ) -> list[TreeEntry]:
        def build() -> list[TreeEntry]:
            tree = tree_builder.build()
            required = parse_tags_csv(tags)
            if required:
                tree = filter_by_tags(tree, required, search_engine.tag_index().paths)
            if sort:
                tree = sort_tree(tree, directories_first)
            if include_counts:
                tree, _ = attach_counts(tree)
            if include_titles:
                tree = attach_titles(tree, workspace.root)
            return tree

        return guarded("structure", build)

    return get_structure


def _create_save_endpoint(content_store: ContentStore, backup_service: Optional[BackupService]):
    """Create the save endpoint handler.

    Accepts either a text/plain body holding the whole page, or a JSON body
    with content and tags. Tags may also be passed as a comma separated query
    parameter.
    """

    async def save_page(
        path: str,
        request: Request,
        background_tasks: BackgroundTasks,
        tags: Optional[str] = None,
    ) -> PlainTextResponse:
        body = await request.body()
        tag_list = parse_tags_csv(tags) if tags is not None else None
        if request.headers.get("content-type", "").startswith("application/json"):
            try:
                payload = SavePageRequest.model_validate_json(body or b"{}")
            except ValidationError as e:
                raise HTTPException(status_code=400, detail="Invalid save request") from e
            content = payload.content
            if payload.tags is not None:
                tag_list = payload.tags
        else:
            try:
                content = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise HTTPException(status_code=400, detail="Content must be UTF-8 text") from e

        saved = await run_in_threadpool(
            guarded, "save", lambda: content_store.save(path, content, tag_list)
        )
        if backup_service is not None:
            background_tasks.add_task(backup_service.run_safely)
        return PlainTextResponse(saved)

    return save_page


def get_pages_router(
    *,
    workspace: Workspace,
    backup_service: Optional[BackupService] = None,
    search_max_results: int = 100,
) -> APIRouter:
    router = APIRouter(prefix="/api/pages")

    resolver = PathResolver(workspace)
    tag_store = TagStore(workspace)
    tree_builder = TreeBuilder(workspace)
    content_store = ContentStore(workspace, resolver=resolver, tag_store=tag_store)
    mutator = EntityMutator(workspace, resolver=resolver, tag_store=tag_store)
    name_validator = NameValidator(workspace, resolver=resolver)
    search_engine = SearchEngine(
        workspace,
        tree_builder=tree_builder,
        tag_store=tag_store,
        max_results=search_max_results,
    )

    router.get("/structure", response_model_exclude_none=True)(
        _create_structure_endpoint(workspace, tree_builder, search_engine)
    )
    router.post("/save")(_create_save_endpoint(content_store, backup_service))

    @router.get("/content", response_model=None)
    def get_content(
        path: str, include_meta: bool = Query(False, alias="includeMeta")
    ) -> PlainTextResponse | PageContent:
        if include_meta:
            return guarded("content", lambda: content_store.read_with_meta(path))
        return PlainTextResponse(guarded("content", lambda: content_store.read(path)))

    @router.get("/meta", response_model=None)
    def get_meta(
        path: str, include_normalized: bool = Query(False, alias="includeNormalized")
    ) -> list[str] | PageTags:
        page_tags = guarded("meta", lambda: content_store.read_tags(path))
        return page_tags if include_normalized else page_tags.display

    @router.get("/breadcrumbs")
    def get_breadcrumbs(path: str) -> list[Breadcrumb]:
        return guarded("breadcrumbs", lambda: content_store.breadcrumbs(path))

    @router.post("/create")
    def create_entity(
        path: str = "", entity_type: str = Query("", alias="type")
    ) -> JSONResponse:
        return outcome_response(mutator.create(path, entity_type))

    @router.delete("/delete")
    def delete_entity(path: str = "", recursive: bool = False) -> JSONResponse:
        return outcome_response(mutator.delete(path, recursive))

    @router.post("/move")
    def move_entity(path: str = "", destination: str = "") -> JSONResponse:
        return outcome_response(mutator.move(path, destination))

    @router.post("/rename")
    def rename_entity(path: str = "", new_name: str = Query("", alias="newName")) -> JSONResponse:
        return outcome_response(mutator.rename(path, new_name))

    @router.get("/validate-name", response_model_exclude_none=True)
    def validate_name(
        path: str = "", entity_type: str = Query("", alias="type"), name: str = ""
    ) -> ValidationOutcome:
        return name_validator.validate(path, entity_type, name)

    @router.get("/search")
    def search(q: str = "", tags: Optional[str] = None, limit: Optional[int] = None) -> list[SearchResult]:
        return guarded("search", lambda: search_engine.search(q, parse_tags_csv(tags), limit))

    @router.get("/recent")
    def recent(tags: Optional[str] = None, limit: Optional[int] = None) -> list[PageSummary]:
        return guarded("recent", lambda: search_engine.recent(parse_tags_csv(tags), limit))

    @router.get("/untagged")
    def untagged() -> list[PageSummary]:
        return guarded("untagged", search_engine.untagged)

    @router.get("/tags")
    def tags() -> list[TagCount]:
        return guarded("tags", search_engine.tag_counts)

    @router.get("/tags/suggest")
    def suggest_tags(prefix: str = "", limit: Optional[int] = None) -> list[str]:
        return guarded("tag suggest", lambda: search_engine.suggest_tags(prefix, limit))

    @router.get("/tags/index")
    def tags_index() -> TagIndex:
        return guarded("tags index", search_engine.tag_index)

    return router
