"""Item lifecycle: create, update, delete, comments and subtasks.

Every mutation holds the store lock across one load-modify-save cycle, then
records its audit events and raises notifications. Events and notifications
are written only after the board itself has been saved.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from taskboard.core.identities import (
    OPERATOR,
    SYSTEM_AUTHOR,
    UNKNOWN_ACTOR,
    clean_identity,
    display_name,
    mentioned_agents,
)
from taskboard.core.ids import unique_id
from taskboard.core.logging import get_logger
from taskboard.core.time import utcnow
from taskboard.schemas.board import (
    DEFAULT_COLUMN_ID,
    Comment,
    Item,
    Priority,
    StageEntry,
    Subtask,
)
from taskboard.schemas.errors import FieldProblem
from taskboard.schemas.events import EventType
from taskboard.services.errors import InvalidColumn, InvalidInput, NotFound
from taskboard.services.events import record_event
from taskboard.services.notifications import (
    notify_assignment,
    notify_blocked,
    notify_comment,
)
from taskboard.services.tags import normalize_tags

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from taskboard.schemas.board import Board, Column
    from taskboard.schemas.items import ItemCreate, ItemUpdate, SubtaskUpdate
    from taskboard.services.store import DocumentStore

logger = get_logger(__name__)


def find_item(board: Board, item_id: str) -> tuple[Column, int, Item]:
    """Locate an item in whichever column holds it, or raise `NotFound`."""
    located = board.locate(item_id)
    if located is None:
        raise NotFound("Item")
    column, index = located
    return column, index, column.items[index]


def resolve_creator(explicit: str | None, hints: Iterable[str | None] = ()) -> str:
    """First usable identity among the explicit value and the caller's hints."""
    for candidate in (explicit, *hints):
        cleaned = clean_identity(candidate)
        if cleaned:
            return cleaned
    return OPERATOR.value


def _system_comment(prefix: str, text: str, *, now: datetime) -> Comment:
    return Comment(id=unique_id(prefix), text=text, author=SYSTEM_AUTHOR, created_at=now)


def _plain(value: object) -> object:
    """Render a field value the way it is persisted, for change diffs."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return list(value)
    return value


def _require_text(value: str | None, *, field: str, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput(
            f"{label} is required",
            fields=[FieldProblem(field=field, message=f"{label} must not be empty")],
        )
    return text


# ----------------------------------------------------------------- items


def create_item(
    store: DocumentStore,
    payload: ItemCreate,
    *,
    identity_hints: Iterable[str | None] = (),
) -> Item:
    """Create an item, allocating the next ticket number."""
    title = _require_text(payload.title, field="title", label="Title")
    tags = normalize_tags(payload.tags)
    column_id = payload.column_id or DEFAULT_COLUMN_ID
    created_by = resolve_creator(payload.created_by, identity_hints)

    with store.locked():
        board = store.load()
        column = board.column(column_id)
        if column is None:
            raise InvalidColumn("Invalid column")

        number = board.next_ticket_number
        board.next_ticket_number = number + 1
        now = utcnow()
        item = Item(
            id=unique_id("item"),
            number=number,
            title=title,
            description=payload.description or "",
            priority=payload.priority or Priority.MEDIUM,
            assignee=payload.assignee or OPERATOR.value,
            tags=tags,
            created_at=now,
            created_by=created_by,
            comments=[
                _system_comment(
                    "comment-created",
                    f"Created by {display_name(created_by)}",
                    now=now,
                ),
            ],
            stage_history=[StageEntry(column=column.id, entered_at=now)],
        )
        column.items.append(item)
        store.save(board)

        record_event(
            store,
            EventType.ITEM_CREATED,
            {
                "item_id": item.id,
                "item_number": item.number,
                "title": item.title,
                "column": column.id,
                "priority": item.priority.value,
                "assignee": item.assignee,
                "tags": list(item.tags),
            },
            actor=created_by,
        )
    logger.info(
        "board.item.created",
        extra={"item_id": item.id, "item_number": item.number, "column": column.id},
    )
    return item


def update_item(
    store: DocumentStore,
    item_id: str,
    payload: ItemUpdate,
    *,
    actor: str = SYSTEM_AUTHOR,
) -> Item:
    """Apply the fields explicitly set on `payload` to an item.

    Assignment and blocking changes also leave a system comment, their own
    audit event and, when they involve the reviewer, a notification.
    """
    updates = payload.changed_fields()
    if "tags" in updates:
        updates["tags"] = normalize_tags(updates["tags"])
    if "created_by" in updates:
        created_by = clean_identity(updates["created_by"])
        if created_by:
            updates["created_by"] = created_by
        else:
            del updates["created_by"]

    with store.locked():
        board = store.load()
        _, _, item = find_item(board, item_id)

        changes: dict[str, dict[str, object]] = {}
        for name, value in updates.items():
            current = getattr(item, name)
            if _plain(current) != _plain(value):
                changes[name] = {"from": _plain(current), "to": _plain(value)}

        now = utcnow()
        previous_assignee = item.assignee
        previous_blocker = item.blocked_by
        assignee_changed = "assignee" in changes
        blocker_changed = "blocked_by" in changes
        if assignee_changed:
            new_assignee = updates["assignee"]
            text = f"Assigned to {display_name(new_assignee)}" if new_assignee else "Unassigned"
            item.comments.append(_system_comment("comment-assign", text, now=now))
        if blocker_changed:
            new_blocker = updates["blocked_by"]
            text = f"Blocked by {display_name(new_blocker)}" if new_blocker else "Unblocked"
            item.comments.append(_system_comment("comment-block", text, now=now))

        for name, value in updates.items():
            setattr(item, name, value)
        store.save(board)

        summary = {"item_id": item.id, "item_number": item.number, "title": item.title}
        if assignee_changed:
            record_event(
                store,
                EventType.ITEM_ASSIGNED,
                {
                    **summary,
                    "from_assignee": previous_assignee,
                    "to_assignee": item.assignee,
                },
                actor=actor,
            )
        if blocker_changed:
            if item.blocked_by:
                record_event(
                    store,
                    EventType.ITEM_BLOCKED,
                    {**summary, "blocked_by": item.blocked_by},
                    actor=actor,
                )
            else:
                record_event(
                    store,
                    EventType.ITEM_UNBLOCKED,
                    {**summary, "was_blocked_by": previous_blocker},
                    actor=actor,
                )
        if changes:
            record_event(
                store,
                EventType.ITEM_UPDATED,
                {**summary, "changes": changes},
                actor=actor,
            )
        if assignee_changed:
            notify_assignment(store, item)
        if blocker_changed:
            notify_blocked(store, item)

    logger.info(
        "board.item.updated",
        extra={"item_id": item.id, "changed_fields": sorted(changes)},
    )
    return item


def delete_item(store: DocumentStore, item_id: str, *, actor: str = SYSTEM_AUTHOR) -> Item:
    """Remove an item; events and notifications that mention it are kept."""
    with store.locked():
        board = store.load()
        column, index, _ = find_item(board, item_id)
        deleted = column.items.pop(index)
        store.save(board)
        record_event(
            store,
            EventType.ITEM_DELETED,
            {
                "item_id": deleted.id,
                "item_number": deleted.number,
                "title": deleted.title,
                "from_column": column.id,
            },
            actor=actor,
        )
    logger.info(
        "board.item.deleted",
        extra={"item_id": deleted.id, "item_number": deleted.number, "column": column.id},
    )
    return deleted


# -------------------------------------------------------------- comments


def add_comment(
    store: DocumentStore,
    item_id: str,
    text: str,
    *,
    author: str | None = None,
) -> Comment:
    """Append a comment and fan out agent mentions.

    Each distinct agent mentioned gets one event and one notification. A
    reviewer comment that mentions nobody notifies the operator instead.
    """
    body = _require_text(text, field="text", label="Comment text")
    author_name = author or UNKNOWN_ACTOR

    with store.locked():
        board = store.load()
        _, _, item = find_item(board, item_id)
        comment = Comment(
            id=unique_id("comment"),
            text=body,
            author=author_name,
            created_at=utcnow(),
        )
        item.comments.append(comment)
        store.save(board)

        summary = {
            "item_id": item.id,
            "item_number": item.number,
            "item_title": item.title,
            "comment_id": comment.id,
        }
        record_event(
            store,
            EventType.COMMENT_ADDED,
            {**summary, "comment_text": comment.text},
            actor=author_name,
        )
        agents = mentioned_agents(comment.text)
        for agent in agents:
            record_event(
                store,
                EventType.AGENT_MENTIONED,
                {**summary, "target_agent": agent.value},
                actor=author_name,
            )
        notify_comment(store, item, comment, agents=agents, author=author)

    logger.info(
        "board.comment.added",
        extra={
            "item_id": item.id,
            "comment_id": comment.id,
            "mentioned_agents": [agent.value for agent in agents],
        },
    )
    return comment


# -------------------------------------------------------------- subtasks


def _find_subtask(item: Item, subtask_id: str) -> tuple[int, Subtask]:
    for index, subtask in enumerate(item.subtasks):
        if subtask.id == subtask_id:
            return index, subtask
    raise NotFound("Subtask")


def add_subtask(
    store: DocumentStore,
    item_id: str,
    text: str,
    *,
    actor: str = SYSTEM_AUTHOR,
) -> Subtask:
    body = _require_text(text, field="text", label="Subtask text")
    with store.locked():
        board = store.load()
        _, _, item = find_item(board, item_id)
        subtask = Subtask(id=unique_id("subtask"), text=body, created_at=utcnow())
        item.subtasks.append(subtask)
        store.save(board)
        record_event(
            store,
            EventType.SUBTASK_ADDED,
            {
                "item_id": item.id,
                "item_number": item.number,
                "item_title": item.title,
                "subtask_id": subtask.id,
                "subtask_text": subtask.text,
            },
            actor=actor,
        )
    return subtask


def update_subtask(
    store: DocumentStore,
    item_id: str,
    subtask_id: str,
    payload: SubtaskUpdate,
    *,
    actor: str = SYSTEM_AUTHOR,
) -> Subtask:
    """Toggle or rename a subtask; an event is recorded only when something changed."""
    with store.locked():
        board = store.load()
        _, _, item = find_item(board, item_id)
        _, subtask = _find_subtask(item, subtask_id)

        changes: dict[str, dict[str, object]] = {}
        if payload.completed is not None and payload.completed != subtask.completed:
            changes["completed"] = {"from": subtask.completed, "to": payload.completed}
            subtask.completed = payload.completed
        if payload.text is not None:
            text = _require_text(payload.text, field="text", label="Subtask text")
            if text != subtask.text:
                changes["text"] = {"from": subtask.text, "to": text}
                subtask.text = text
        if not changes:
            return subtask

        store.save(board)
        record_event(
            store,
            EventType.SUBTASK_UPDATED,
            {
                "item_id": item.id,
                "item_number": item.number,
                "subtask_id": subtask.id,
                "changes": changes,
            },
            actor=actor,
        )
    return subtask


def delete_subtask(
    store: DocumentStore,
    item_id: str,
    subtask_id: str,
    *,
    actor: str = SYSTEM_AUTHOR,
) -> Subtask:
    with store.locked():
        board = store.load()
        _, _, item = find_item(board, item_id)
        index, _ = _find_subtask(item, subtask_id)
        removed = item.subtasks.pop(index)
        store.save(board)
        record_event(
            store,
            EventType.SUBTASK_DELETED,
            {
                "item_id": item.id,
                "item_number": item.number,
                "subtask_id": removed.id,
                "subtask_text": removed.text,
            },
            actor=actor,
        )
    return removed
