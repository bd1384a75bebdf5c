"""Move and reorder items between and within columns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from taskboard.core.identities import SYSTEM_AUTHOR, UNKNOWN_ACTOR, display_name
from taskboard.core.ids import unique_id
from taskboard.core.logging import get_logger
from taskboard.core.time import utcnow
from taskboard.schemas.board import TERMINAL_COLUMN_ID, Comment, StageEntry
from taskboard.schemas.events import EventType
from taskboard.schemas.items import MoveResult
from taskboard.services.errors import InvalidColumn
from taskboard.services.events import record_event
from taskboard.services.lifecycle import find_item
from taskboard.services.notifications import notify_move

if TYPE_CHECKING:
    from taskboard.schemas.board import Column, Item
    from taskboard.services.store import DocumentStore

logger = get_logger(__name__)


def default_position(column: Column) -> int:
    """Done lists newest first; every other column appends."""
    if column.id == TERMINAL_COLUMN_ID:
        return 0
    return len(column.items)


def _enter_column(item: Item, column: Column, *, mover: str) -> None:
    now = utcnow()
    if item.stage_history:
        now = max(now, item.stage_history[-1].entered_at)
    item.stage_history.append(StageEntry(column=column.id, entered_at=now))
    item.comments.append(
        Comment(
            id=unique_id("comment-move"),
            text=f"Moved to {column.title} by {display_name(mover)}",
            author=SYSTEM_AUTHOR,
            created_at=now,
        ),
    )


def move_item(
    store: DocumentStore,
    item_id: str,
    to_column_id: str,
    *,
    position: int | None = None,
    moved_by: str | None = None,
) -> MoveResult:
    """Relocate an item, or reorder it when the target is its own column.

    Only a cross-column move touches stage history, comments, events and
    notifications. An unknown target column leaves the board untouched.
    Out-of-range positions behave like `list.insert`.
    """
    with store.locked():
        board = store.load()
        from_column, index, item = find_item(board, item_id)
        from_column.items.pop(index)

        to_column = board.column(to_column_id)
        if to_column is None:
            from_column.items.insert(index, item)
            logger.warning(
                "board.item.move_rejected",
                extra={"item_id": item.id, "to_column": to_column_id},
            )
            raise InvalidColumn("Invalid target column")

        mover = moved_by or item.assignee or UNKNOWN_ACTOR
        crossed = from_column.id != to_column.id
        if crossed:
            _enter_column(item, to_column, mover=mover)

        insert_at = position if position is not None else default_position(to_column)
        to_column.items.insert(insert_at, item)
        store.save(board)

        if crossed:
            record_event(
                store,
                EventType.ITEM_MOVED,
                {
                    "item_id": item.id,
                    "item_number": item.number,
                    "title": item.title,
                    "from_column": from_column.id,
                    "to_column": to_column.id,
                },
                actor=mover,
            )
            notify_move(store, item, to_column=to_column.id, moved_by=mover)

    logger.info(
        "board.item.moved" if crossed else "board.item.reordered",
        extra={
            "item_id": item.id,
            "from_column": from_column.id,
            "to_column": to_column.id,
            "position": insert_at,
        },
    )
    return MoveResult(item=item, from_column=from_column.id, to_column=to_column.id)
