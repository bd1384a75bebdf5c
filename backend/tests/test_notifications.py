# ruff: noqa: INP001
"""Notification store: raise, poll, acknowledge, clear."""

from __future__ import annotations

import pytest

from taskboard.schemas.notifications import NotificationType
from taskboard.services.errors import NotFound
from taskboard.services.notifications import (
    clear_notifications,
    delete_notification,
    list_notifications,
    raise_notification,
)
from taskboard.services.store import DocumentStore


def test_notifications_are_listed_in_creation_order(store: DocumentStore) -> None:
    first = raise_notification(store, NotificationType.MOVED_TO_REVIEW, {"item_id": "a"})
    second = raise_notification(store, NotificationType.KENNY_COMMENT, {"item_id": "b"})

    listed = list_notifications(store)

    assert [n.id for n in listed] == [first.id, second.id]
    assert listed[0].payload == {"item_id": "a"}
    assert first.id.startswith("notif-")


def test_delete_returns_the_removed_notification(store: DocumentStore) -> None:
    first = raise_notification(store, NotificationType.MOVED_TO_REVIEW, {"item_id": "a"})
    second = raise_notification(store, NotificationType.JIMMY_COMPLETED, {"item_id": "b"})

    removed = delete_notification(store, first.id)

    assert removed.id == first.id
    assert [n.id for n in list_notifications(store)] == [second.id]


def test_delete_unknown_notification(store: DocumentStore) -> None:
    with pytest.raises(NotFound, match="Notification not found"):
        delete_notification(store, "notif-missing")


def test_clear_removes_everything(store: DocumentStore) -> None:
    for notification_type in NotificationType:
        raise_notification(store, notification_type, {})

    clear_notifications(store)

    assert list_notifications(store) == []
