"""Audit event schemas and the closed set of event types."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from taskboard.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime,)


class EventType(str, Enum):
    """Every mutation the board records in its audit trail."""

    # Item lifecycle
    ITEM_CREATED = "ITEM_CREATED"
    ITEM_UPDATED = "ITEM_UPDATED"
    ITEM_MOVED = "ITEM_MOVED"
    ITEM_DELETED = "ITEM_DELETED"

    # Comments and subtasks
    COMMENT_ADDED = "COMMENT_ADDED"
    SUBTASK_ADDED = "SUBTASK_ADDED"
    SUBTASK_UPDATED = "SUBTASK_UPDATED"
    SUBTASK_DELETED = "SUBTASK_DELETED"

    # Assignment and blocking
    ITEM_ASSIGNED = "ITEM_ASSIGNED"
    ITEM_BLOCKED = "ITEM_BLOCKED"
    ITEM_UNBLOCKED = "ITEM_UNBLOCKED"

    AGENT_MENTIONED = "AGENT_MENTIONED"


class Event(SQLModel):
    """Append-only audit record for one mutation."""

    id: str
    type: EventType
    timestamp: datetime = Field(default_factory=utcnow)
    actor: str = "system"
    payload: dict[str, object] = Field(default_factory=dict)


class EventLogDocument(SQLModel):
    """Persisted event log (bounded FIFO, oldest first)."""

    events: list[Event] = Field(default_factory=list)


class EventListResponse(SQLModel):
    """Event query result plus the list of known event types."""

    events: list[Event]
    event_types: list[str] = Field(
        default_factory=lambda: [event_type.value for event_type in EventType],
    )
