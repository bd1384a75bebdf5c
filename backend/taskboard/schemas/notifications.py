"""Notification schemas consumed by polling collaborators."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from taskboard.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime,)


class NotificationType(str, Enum):
    """Actionable notices raised by board mutations."""

    ASSIGNED_TO_KENNY = "assigned_to_kenny"
    BLOCKED_BY_KENNY = "blocked_by_kenny"
    JIMMY_COMPLETED = "jimmy_completed"
    MOVED_TO_REVIEW = "moved_to_review"
    MENTION_AGENT = "mention_agent"
    KENNY_COMMENT = "kenny_comment"


class Notification(SQLModel):
    """Pending notice; removed once a poller acknowledges it."""

    id: str
    type: NotificationType
    payload: dict[str, object] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)


class NotificationDocument(SQLModel):
    """Persisted notification list, in creation order."""

    notifications: list[Notification] = Field(default_factory=list)


class NotificationsCleared(SQLModel):
    cleared: bool = True
