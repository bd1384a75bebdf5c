"""Request and response payloads for item lifecycle, move, comment and subtask operations."""

from __future__ import annotations

from typing import Self

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

from taskboard.core.identities import Identity, is_known_identity
from taskboard.schemas.board import Item, Priority

TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 2000
TEXT_MAX_LENGTH = 2000
IDENTITY_MAX_LENGTH = 40
MAX_TAGS = 20
TAG_MAX_LENGTH = 30

_KNOWN_IDENTITIES_HINT = ", ".join(identity.value for identity in Identity)
_ERR_TITLE_NULL = "title must be a string"
_ERR_PRIORITY_NULL = "priority must be one of: low, medium, high"


def _clean_identity_field(value: object | None, *, field_name: str) -> str | None:
    """Lowercase/trim a person field; empty means "nobody"."""
    if value is None:
        return None
    normalized = str(value).strip().lower()
    if not normalized:
        return None
    if not is_known_identity(normalized):
        raise ValueError(
            f"{field_name} must be one of: {_KNOWN_IDENTITIES_HINT} (or empty)",
        )
    return normalized


def _strip_optional(value: str | None) -> str | None:
    return value.strip() if value is not None else None


def _check_tags(tags: list[str] | str | None) -> list[str] | str | None:
    # Non-list values are rejected by the tag normalizer with a 400.
    if not isinstance(tags, list):
        return tags
    if len(tags) > MAX_TAGS:
        raise ValueError(f"tags must have at most {MAX_TAGS} entries")
    for tag in tags:
        if len(tag.strip()) > TAG_MAX_LENGTH:
            raise ValueError(f"each tag must be at most {TAG_MAX_LENGTH} characters")
    return tags


class ItemCreate(SQLModel):
    """Payload for creating an item.

    Shape and length checks happen here; board invariants (non-empty title,
    tag normalization, column existence) are enforced by the lifecycle service.
    """

    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    priority: Priority | None = None
    assignee: str | None = None
    created_by: str | None = Field(default=None, max_length=IDENTITY_MAX_LENGTH)
    column_id: str | None = None
    tags: list[str] | str | None = None

    @field_validator("title", "description", "column_id")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return _strip_optional(value)

    @field_validator("assignee", mode="before")
    @classmethod
    def _assignee(cls, value: object | None) -> str | None:
        return _clean_identity_field(value, field_name="assignee")

    @field_validator("tags")
    @classmethod
    def _tags(cls, value: list[str] | str | None) -> list[str] | str | None:
        return _check_tags(value)


# Item attributes an update may touch; anything else in the payload is metadata.
UPDATABLE_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "priority",
    "assignee",
    "blocked_by",
    "tags",
    "created_by",
)


class ItemUpdate(SQLModel):
    """Partial update; only explicitly provided fields are applied."""

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    priority: Priority | None = None
    assignee: str | None = None
    blocked_by: str | None = None
    tags: list[str] | str | None = None
    created_by: str | None = Field(default=None, max_length=IDENTITY_MAX_LENGTH)
    updated_by: str | None = Field(default=None, max_length=IDENTITY_MAX_LENGTH)

    @field_validator("title", "description")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return _strip_optional(value)

    @field_validator("assignee", mode="before")
    @classmethod
    def _assignee(cls, value: object | None) -> str | None:
        return _clean_identity_field(value, field_name="assignee")

    @field_validator("blocked_by", mode="before")
    @classmethod
    def _blocked_by(cls, value: object | None) -> str | None:
        return _clean_identity_field(value, field_name="blocked_by")

    @field_validator("tags")
    @classmethod
    def _tags(cls, value: list[str] | str | None) -> list[str] | str | None:
        return _check_tags(value)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> Self:
        # Explicit null on these fields is invalid for patch updates.
        if "title" in self.model_fields_set:
            if self.title is None:
                raise ValueError(_ERR_TITLE_NULL)
            if not self.title:
                raise ValueError("title must be 1-120 characters")
        if "priority" in self.model_fields_set and self.priority is None:
            raise ValueError(_ERR_PRIORITY_NULL)
        if "description" in self.model_fields_set and self.description is None:
            self.description = ""
        return self

    def changed_fields(self) -> dict[str, object]:
        """Item attributes explicitly present in this payload, in declaration order."""
        return {
            name: getattr(self, name)
            for name in UPDATABLE_FIELDS
            if name in self.model_fields_set
        }


class ItemMove(SQLModel):
    """Payload for moving or reordering an item."""

    to_column_id: str
    position: int | None = Field(default=None, ge=0)
    moved_by: str | None = Field(default=None, max_length=IDENTITY_MAX_LENGTH)

    @field_validator("to_column_id")
    @classmethod
    def _strip_column(cls, value: str) -> str:
        return value.strip()

    @field_validator("moved_by")
    @classmethod
    def _strip_moved_by(cls, value: str | None) -> str | None:
        return _strip_optional(value) or None


class MoveResult(SQLModel):
    """Outcome of a move: the relocated item and its source/target columns."""

    item: Item
    from_column: str
    to_column: str


class CommentCreate(SQLModel):
    """Payload for adding a comment to an item."""

    text: str = Field(min_length=1, max_length=TEXT_MAX_LENGTH)
    author: str | None = Field(default=None, max_length=IDENTITY_MAX_LENGTH)

    @field_validator("text")
    @classmethod
    def _text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("text is required")
        return text

    @field_validator("author")
    @classmethod
    def _author(cls, value: str | None) -> str | None:
        return _strip_optional(value) or None


class SubtaskCreate(SQLModel):
    """Payload for adding a subtask."""

    text: str = Field(min_length=1, max_length=TEXT_MAX_LENGTH)

    @field_validator("text")
    @classmethod
    def _text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("text is required")
        return text


class SubtaskUpdate(SQLModel):
    """Payload for toggling or renaming a subtask."""

    completed: bool | None = None
    text: str | None = Field(default=None, min_length=1, max_length=TEXT_MAX_LENGTH)
