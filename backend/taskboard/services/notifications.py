"""Notification store and the rules that raise notices from board mutations.

Pollers list pending notifications and delete each one once handled, so
delivery is at-least-once from the poller's side.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from taskboard.core.identities import OPERATOR, REVIEWER, Agent
from taskboard.core.ids import unique_id
from taskboard.core.logging import get_logger
from taskboard.core.time import utcnow
from taskboard.schemas.board import REVIEW_COLUMN_ID, TERMINAL_COLUMN_ID
from taskboard.schemas.notifications import (
    Notification,
    NotificationDocument,
    NotificationType,
)
from taskboard.services.errors import NotFound

if TYPE_CHECKING:
    from taskboard.schemas.board import Comment, Item
    from taskboard.services.store import DocumentStore

logger = get_logger(__name__)


def raise_notification(
    store: DocumentStore,
    notification_type: NotificationType,
    payload: dict[str, object],
) -> Notification:
    notification = Notification(
        id=unique_id("notif"),
        type=notification_type,
        payload=payload,
        created_at=utcnow(),
    )
    with store.locked():
        document = store.load_notifications()
        document.notifications.append(notification)
        store.save_notifications(document)
    logger.info(
        "board.notification.raised",
        extra={
            "notification_type": notification_type.value,
            "item_id": payload.get("item_id"),
        },
    )
    return notification


def list_notifications(store: DocumentStore) -> list[Notification]:
    return store.load_notifications().notifications


def delete_notification(store: DocumentStore, notification_id: str) -> Notification:
    """Acknowledge one notification; returns the removed entry."""
    with store.locked():
        document = store.load_notifications()
        for index, notification in enumerate(document.notifications):
            if notification.id == notification_id:
                removed = document.notifications.pop(index)
                store.save_notifications(document)
                return removed
    raise NotFound("Notification")


def clear_notifications(store: DocumentStore) -> None:
    with store.locked():
        store.save_notifications(NotificationDocument())
    logger.info("board.notifications.cleared")


# ------------------------------------------------------------------ rules


def notify_assignment(store: DocumentStore, item: Item) -> Notification | None:
    """Tell the reviewer when work lands on their plate."""
    if item.assignee != REVIEWER.value:
        return None
    return raise_notification(
        store,
        NotificationType.ASSIGNED_TO_KENNY,
        {"item_id": item.id, "item_title": item.title},
    )


def notify_blocked(store: DocumentStore, item: Item) -> Notification | None:
    if item.blocked_by != REVIEWER.value:
        return None
    return raise_notification(
        store,
        NotificationType.BLOCKED_BY_KENNY,
        {"item_id": item.id, "item_title": item.title},
    )


def notify_move(
    store: DocumentStore,
    item: Item,
    *,
    to_column: str,
    moved_by: str,
) -> list[Notification]:
    """Raise the notices a cross-column move calls for.

    The operator finishing an item notifies the reviewer; anything entering
    review needs the operator's attention whoever moved it.
    """
    raised: list[Notification] = []
    if to_column == TERMINAL_COLUMN_ID and moved_by == OPERATOR.value:
        raised.append(
            raise_notification(
                store,
                NotificationType.JIMMY_COMPLETED,
                {"item_id": item.id, "item_title": item.title},
            ),
        )
    if to_column == REVIEW_COLUMN_ID:
        raised.append(
            raise_notification(
                store,
                NotificationType.MOVED_TO_REVIEW,
                {
                    "item_id": item.id,
                    "item_number": item.number,
                    "item_title": item.title,
                    "moved_by": moved_by,
                },
            ),
        )
    return raised


def notify_comment(
    store: DocumentStore,
    item: Item,
    comment: Comment,
    *,
    agents: list[Agent],
    author: str | None,
) -> list[Notification]:
    """One notice per mentioned agent, or a reviewer-comment notice when nobody was mentioned."""
    commented_at = comment.created_at.isoformat()
    if agents:
        return [
            raise_notification(
                store,
                NotificationType.MENTION_AGENT,
                {
                    "item_id": item.id,
                    "item_number": item.number,
                    "item_title": item.title,
                    "comment_id": comment.id,
                    "comment_text": comment.text,
                    "commented_at": commented_at,
                    "author": author,
                    "target_agent": agent.value,
                },
            )
            for agent in agents
        ]
    if author == REVIEWER.value:
        return [
            raise_notification(
                store,
                NotificationType.KENNY_COMMENT,
                {
                    "item_id": item.id,
                    "item_title": item.title,
                    "comment_id": comment.id,
                    "comment_text": comment.text,
                    "commented_at": commented_at,
                },
            ),
        ]
    return []
