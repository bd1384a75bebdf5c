"""Board document schemas: columns, items, comments, subtasks, stage history."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from taskboard.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime,)

# Fixed pipeline, in display order.
BOARD_COLUMNS: tuple[tuple[str, str], ...] = (
    ("backlog", "Backlog"),
    ("todo", "Todo"),
    ("doing", "Doing"),
    ("review", "Review"),
    ("done", "Done"),
)
DEFAULT_COLUMN_ID = "todo"
IN_PROGRESS_COLUMN_ID = "doing"
REVIEW_COLUMN_ID = "review"
TERMINAL_COLUMN_ID = "done"
DEFAULT_TAG = "needs-triage"


class Priority(str, Enum):
    """Item priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StageEntry(SQLModel):
    """One column entry in an item's stage history."""

    column: str
    entered_at: datetime = Field(default_factory=utcnow)


class Comment(SQLModel):
    """Append-only comment on an item (user-written or system-generated)."""

    id: str
    text: str
    author: str
    created_at: datetime = Field(default_factory=utcnow)


class Subtask(SQLModel):
    """Checklist entry attached to an item."""

    id: str
    text: str
    completed: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class Item(SQLModel):
    """Work item tracked on the board."""

    id: str
    number: int
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    assignee: str | None = None
    blocked_by: str | None = None
    tags: list[str] = Field(default_factory=lambda: [DEFAULT_TAG])
    created_at: datetime = Field(default_factory=utcnow)
    created_by: str
    comments: list[Comment] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    stage_history: list[StageEntry] = Field(default_factory=list)


class Column(SQLModel):
    """A pipeline stage and the ordered items currently in it."""

    id: str
    title: str
    items: list[Item] = Field(default_factory=list)


class Board(SQLModel):
    """Root board document; the whole board is the unit of persistence."""

    columns: list[Column] = Field(default_factory=list)
    next_ticket_number: int = Field(default=1, ge=1)
    last_updated: datetime = Field(default_factory=utcnow)

    @classmethod
    def empty(cls) -> Board:
        return cls(
            columns=[Column(id=column_id, title=title) for column_id, title in BOARD_COLUMNS],
        )

    def column(self, column_id: str) -> Column | None:
        return next((column for column in self.columns if column.id == column_id), None)

    def locate(self, item_id: str) -> tuple[Column, int] | None:
        """Return the column holding `item_id` and the item's index in it."""
        for column in self.columns:
            for index, item in enumerate(column.items):
                if item.id == item_id:
                    return column, index
        return None

    def all_items(self) -> list[Item]:
        return [item for column in self.columns for item in column.items]


class BackupHandle(SQLModel):
    """Location of a board snapshot written next to the live document."""

    name: str
    path: str
