from nodepad.domain.outcomes import OutcomeKind


class NodePadError(Exception):
    """Base error for read-side page operations."""

    kind = OutcomeKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(NodePadError):
    kind = OutcomeKind.INVALID_INPUT


class ForbiddenError(NodePadError):
    kind = OutcomeKind.FORBIDDEN


class NotFoundError(NodePadError):
    kind = OutcomeKind.NOT_FOUND
