"""Structured error payload schemas used by API responses."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel
from sqlmodel._compat import SQLModelConfig


class FieldProblem(SQLModel):
    """One invalid field in a rejected request."""

    field: str
    message: str


class BoardErrorDetail(SQLModel):
    """Machine-readable board error context."""

    code: str = Field(
        description="Stable error code; clients should branch on this value.",
        examples=["not_found", "invalid_column", "invalid_input", "storage_failure"],
    )
    message: str = Field(
        description="Human-readable explanation suitable for display.",
        examples=["Item not found"],
    )
    fields: list[FieldProblem] | None = Field(
        default=None,
        description="Per-field problems, when the error concerns specific inputs.",
    )


class ErrorResponse(SQLModel):
    """Standard error envelope returned by every failing board operation."""

    model_config = SQLModelConfig(
        json_schema_extra={
            "title": "ErrorResponse",
            "x-when-to-use": [
                "Domain errors (unknown item, unknown column, invalid tags)",
                "Unexpected failures, reported without internal detail",
            ],
        },
    )

    detail: BoardErrorDetail | str | list[object] = Field(
        description=(
            "Error payload. Domain errors carry `code` and `message`; request "
            "shape errors carry a list of validation problems."
        ),
        examples=[
            {"code": "not_found", "message": "Item not found"},
            "Internal Server Error",
        ],
    )
    request_id: str | None = Field(
        default=None,
        description="Request correlation identifier injected by middleware.",
    )
