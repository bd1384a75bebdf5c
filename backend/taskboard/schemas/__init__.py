"""Public schema exports shared across API route modules."""

from taskboard.schemas.board import (
    BackupHandle,
    Board,
    Column,
    Comment,
    Item,
    Priority,
    StageEntry,
    Subtask,
)
from taskboard.schemas.client_settings import SettingsSaved
from taskboard.schemas.errors import BoardErrorDetail, ErrorResponse, FieldProblem
from taskboard.schemas.events import Event, EventListResponse, EventType
from taskboard.schemas.health import HealthStatusResponse
from taskboard.schemas.items import (
    CommentCreate,
    ItemCreate,
    ItemMove,
    ItemUpdate,
    MoveResult,
    SubtaskCreate,
    SubtaskUpdate,
)
from taskboard.schemas.metrics import BoardMetrics, CycleTimeEntry, StageAverage
from taskboard.schemas.notifications import (
    Notification,
    NotificationsCleared,
    NotificationType,
)

__all__ = [
    "BackupHandle",
    "Board",
    "BoardErrorDetail",
    "BoardMetrics",
    "Column",
    "Comment",
    "CommentCreate",
    "CycleTimeEntry",
    "ErrorResponse",
    "Event",
    "EventListResponse",
    "EventType",
    "FieldProblem",
    "HealthStatusResponse",
    "Item",
    "ItemCreate",
    "ItemMove",
    "ItemUpdate",
    "MoveResult",
    "Notification",
    "NotificationType",
    "NotificationsCleared",
    "Priority",
    "SettingsSaved",
    "StageAverage",
    "StageEntry",
    "Subtask",
    "SubtaskCreate",
    "SubtaskUpdate",
]
