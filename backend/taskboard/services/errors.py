"""Domain error taxonomy raised by the board engine.

Errors subclass FastAPI's `HTTPException` so the HTTP layer renders them
without per-route translation; `detail` is always a dict with `code` and
`message` (plus `fields` for per-field input problems).
"""

from __future__ import annotations

from fastapi import HTTPException, status

from taskboard.schemas.errors import FieldProblem


class BoardError(HTTPException):
    """Base class for caller-visible board errors."""

    code = "board_error"
    status_code_default = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, fields: list[FieldProblem] | None = None) -> None:
        detail: dict[str, object] = {"code": self.code, "message": message}
        if fields:
            detail["fields"] = [problem.model_dump() for problem in fields]
        super().__init__(status_code=self.status_code_default, detail=detail)
        self.message = message
        self.fields = fields or []

    def __str__(self) -> str:
        return self.message


class InvalidInput(BoardError):
    """Malformed or missing input; nothing was mutated."""

    code = "invalid_input"


class InvalidColumn(BoardError):
    """Unknown column id; any partially-applied state was restored."""

    code = "invalid_column"


class NotFound(BoardError):
    """No entity with the given id."""

    code = "not_found"
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource


class StorageFailure(BoardError):
    """Board documents could not be read or written."""

    code = "storage_failure"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Board storage is unavailable") -> None:
        super().__init__(message)
