"""Structural changes to the pages tree: create, delete, move and rename."""

import functools
import shutil
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from nodepad.config import Workspace
from nodepad.domain.outcomes import MutationOutcome, OutcomeKind

from .fileio import write_text_atomic
from .path_resolver import PathResolver
from .tag_store import TagStore
from .titles import UNTITLED

PLACEHOLDER_BODY = "Start writing here."

FILE_TYPES = {"file"}
FOLDER_TYPES = {"directory", "folder"}


def seed_content(document: Path) -> str:
    """Initial content of a freshly created page."""
    title = document.stem.strip() or UNTITLED
    return f"# {title}\n\n{PLACEHOLDER_BODY}"


def last_segment(name: Optional[str]) -> str:
    """Reduce a name to its last path segment."""
    return (name or "").replace("\\", "/").rstrip("/").split("/")[-1].strip()


def _guarded(action: str) -> Callable:
    """Turn unexpected filesystem and path errors into FORBIDDEN or INTERNAL outcomes."""

    def decorator(func: Callable[..., MutationOutcome]) -> Callable[..., MutationOutcome]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> MutationOutcome:
            try:
                return func(*args, **kwargs)
            except PermissionError as e:
                logger.warning(f"Permission denied during {action}: {e}")
                return MutationOutcome.failure(OutcomeKind.FORBIDDEN, "Permission denied")
            except (OSError, ValueError):
                logger.exception(f"Unexpected error during {action}")
                return MutationOutcome.failure(OutcomeKind.INTERNAL, f"Failed to {action}")

        return wrapper

    return decorator


class EntityMutator:
    """Creates, deletes, moves and renames pages and folders.

    Every operation takes paths exactly as received from the client, resolves
    them through the PathResolver, and re-checks containment of every
    destination it builds before touching the disk. Sidecar tag files follow
    their page on a best-effort basis.
    """

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

    @_guarded("create")
    def create(self, path: Optional[str], entity_type: Optional[str]) -> MutationOutcome:
        """
        Create a page seeded with a heading, or a folder.

        Args:
            path: Relative path of the new entity
            entity_type: "file" for a page, "directory" or "folder" for a folder
        """
        entity_type = (entity_type or "").strip().lower()
        if not (path or "").strip() or not entity_type:
            return MutationOutcome.failure(OutcomeKind.INVALID_INPUT, "Path and type are required")
        if entity_type not in FILE_TYPES | FOLDER_TYPES:
            return MutationOutcome.failure(
                OutcomeKind.INVALID_INPUT, f"Unsupported type: {entity_type}"
            )

        target = self.resolver.resolve_folder(path)
        if target is None:
            return _outside()
        if target == self.workspace.root:
            return MutationOutcome.failure(OutcomeKind.INVALID_INPUT, "Path is required")
        if target.exists():
            return MutationOutcome.failure(OutcomeKind.CONFLICT, "An entity with that name already exists")

        if entity_type in FILE_TYPES:
            if not self.workspace.is_document(target):
                return _wrong_extension(self.workspace)
            write_text_atomic(target, seed_content(target))
            self.tag_store.write(target, [])
        else:
            target.mkdir(parents=True)

        logger.info(f"Created {entity_type} {self.workspace.relative(target)}")
        return MutationOutcome.success(self.workspace.relative(target))

    @_guarded("delete")
    def delete(self, path: Optional[str], recursive: bool = False) -> MutationOutcome:
        """
        Delete a page (with its sidecar) or a folder.

        A non-empty folder is only removed when recursive is set; otherwise the
        outcome is NEEDS_CONFIRMATION so the caller can ask the user.
        """
        if not (path or "").strip():
            return MutationOutcome.failure(OutcomeKind.INVALID_INPUT, "Path is required")
        target = self.resolver.resolve_folder(path)
        if target is None:
            return _outside()
        if target == self.workspace.root:
            return MutationOutcome.failure(
                OutcomeKind.INVALID_INPUT, "Cannot delete the pages directory"
            )
        relative = self.workspace.relative(target)

        if target.is_file():
            if not self.workspace.is_document(target):
                return _wrong_extension(self.workspace)
            target.unlink()
            self._delete_sidecar(target)
            logger.info(f"Deleted page {relative}")
            return MutationOutcome.success(relative)

        if target.is_dir():
            if not any(target.iterdir()):
                target.rmdir()
            elif not recursive:
                return MutationOutcome.failure(
                    OutcomeKind.NEEDS_CONFIRMATION,
                    "Folder is not empty; confirm to delete it with all its contents",
                )
            else:
                shutil.rmtree(target)
            logger.info(f"Deleted folder {relative} (recursive={recursive})")
            return MutationOutcome.success(relative)

        return MutationOutcome.failure(OutcomeKind.NOT_FOUND, "Not found")

    @_guarded("move")
    def move(self, source: Optional[str], destination: Optional[str]) -> MutationOutcome:
        """
        Move a page or folder into another folder, keeping its name.

        Args:
            source: Relative path of the page or folder to move
            destination: Relative path of the target folder; empty means the root
        """
        if not (source or "").strip():
            return MutationOutcome.failure(OutcomeKind.INVALID_INPUT, "Source path is required")
        src = self.resolver.resolve_folder(source)
        dest_dir = self.resolver.resolve_folder(destination or "")
        if src is None or dest_dir is None:
            return _outside()
        if src == self.workspace.root:
            return MutationOutcome.failure(OutcomeKind.INVALID_INPUT, "Cannot move the pages directory")
        if not src.exists():
            return MutationOutcome.failure(OutcomeKind.NOT_FOUND, "Source not found")
        if not dest_dir.is_dir():
            return MutationOutcome.failure(OutcomeKind.NOT_FOUND, "Destination folder not found")

        if src.is_file():
            if not self.workspace.is_document(src):
                return _wrong_extension(self.workspace)
        elif dest_dir == src or src in dest_dir.parents:
            return MutationOutcome.failure(
                OutcomeKind.INVALID_INPUT, "Cannot move a folder into itself or one of its subfolders"
            )

        target = self.resolver.contain(dest_dir / src.name)
        if target is None:
            return _outside()
        if target.exists():
            return MutationOutcome.failure(
                OutcomeKind.CONFLICT, "An entity with that name already exists in the destination"
            )

        shutil.move(str(src), str(target))
        if target.is_file():
            self._move_sidecar(src, target)
        logger.info(f"Moved {self.workspace.relative(src)} -> {self.workspace.relative(target)}")
        return MutationOutcome.success(self.workspace.relative(target))

    @_guarded("rename")
    def rename(self, path: Optional[str], new_name: Optional[str]) -> MutationOutcome:
        """
        Rename a page or folder in place.

        The new name is reduced to its last segment so a rename never moves the
        entity to another folder. Pages get the document extension appended
        when it is missing.
        """
        if not (path or "").strip():
            return MutationOutcome.failure(OutcomeKind.INVALID_INPUT, "Path is required")
        src = self.resolver.resolve_folder(path)
        if src is None:
            return _outside()
        if src == self.workspace.root:
            return MutationOutcome.failure(
                OutcomeKind.INVALID_INPUT, "Cannot rename the pages directory"
            )
        if not src.exists():
            return MutationOutcome.failure(OutcomeKind.NOT_FOUND, "Not found")

        name = last_segment(new_name)
        if not name or name in {".", ".."}:
            return MutationOutcome.failure(OutcomeKind.INVALID_INPUT, "New name is required")

        is_file = src.is_file()
        if is_file:
            if not self.workspace.is_document(src):
                return _wrong_extension(self.workspace)
            if not self.workspace.is_document(Path(name)):
                name += self.workspace.document_extension

        target = self.resolver.contain(src.parent / name)
        if target is None:
            return _outside()
        if target == src:
            return MutationOutcome.success(self.workspace.relative(src), "Name unchanged")
        if target.exists():
            return MutationOutcome.failure(
                OutcomeKind.CONFLICT, "An entity with that name already exists"
            )

        src.rename(target)
        if is_file:
            self._move_sidecar(src, target)
        logger.info(f"Renamed {self.workspace.relative(src)} -> {self.workspace.relative(target)}")
        return MutationOutcome.success(self.workspace.relative(target))

    def _delete_sidecar(self, document: Path) -> None:
        sidecar = self.tag_store.sidecar_path(document)
        try:
            sidecar.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not delete tags file {sidecar}: {e}")

    def _move_sidecar(self, old_document: Path, new_document: Path) -> None:
        old_sidecar = self.tag_store.sidecar_path(old_document)
        if not old_sidecar.exists():
            return
        new_sidecar = self.tag_store.sidecar_path(new_document)
        try:
            shutil.move(str(old_sidecar), str(new_sidecar))
        except OSError as e:
            logger.warning(f"Could not move tags file {old_sidecar} -> {new_sidecar}: {e}")


def _outside() -> MutationOutcome:
    return MutationOutcome.failure(OutcomeKind.FORBIDDEN, "Path is outside the pages directory")


def _wrong_extension(workspace: Workspace) -> MutationOutcome:
    return MutationOutcome.failure(
        OutcomeKind.INVALID_INPUT, f"Pages must use the {workspace.document_extension} extension"
    )
