"""Structured results of tree mutations and name validation."""

from enum import Enum
from typing import Optional

from nodepad.domain.base import ApiModel


class OutcomeKind(str, Enum):
    OK = "ok"
    INVALID_INPUT = "invalid_input"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    NEEDS_CONFIRMATION = "needs_confirmation"
    INTERNAL = "internal"


class MutationOutcome(ApiModel):
    """Result of a create, delete, move or rename.

    Attributes:
        kind: What happened; anything other than OK means nothing was changed
            on disk apart from best-effort sidecar handling
        message: Human readable explanation, safe to show to users
        path: Relative path of the affected entity after the operation
    """

    kind: OutcomeKind
    message: str = ""
    path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.OK

    @classmethod
    def success(cls, path: str, message: str = "") -> "MutationOutcome":
        return cls(kind=OutcomeKind.OK, path=path, message=message)

    @classmethod
    def failure(cls, kind: OutcomeKind, message: str) -> "MutationOutcome":
        return cls(kind=kind, message=message)


class ValidationOutcome(ApiModel):
    valid: bool
    message: Optional[str] = None
    suggested_name: Optional[str] = None

    @classmethod
    def accepted(cls, suggested_name: Optional[str] = None) -> "ValidationOutcome":
        return cls(valid=True, suggested_name=suggested_name)

    @classmethod
    def rejected(
        cls, message: str, suggested_name: Optional[str] = None
    ) -> "ValidationOutcome":
        return cls(valid=False, message=message, suggested_name=suggested_name)
