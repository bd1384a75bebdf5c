"""Notification polling endpoints: list, acknowledge one, clear all."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from taskboard.api.deps import STORE_DEP
from taskboard.schemas.notifications import Notification, NotificationsCleared
from taskboard.services import notifications

if TYPE_CHECKING:
    from taskboard.services.store import DocumentStore

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[Notification])
def list_notifications(store: DocumentStore = STORE_DEP) -> list[Notification]:
    """Pending notifications, oldest first."""
    return notifications.list_notifications(store)


@router.delete("/{notification_id}", response_model=Notification)
def delete_notification(
    notification_id: str,
    store: DocumentStore = STORE_DEP,
) -> Notification:
    """Acknowledge a processed notification."""
    return notifications.delete_notification(store, notification_id)


@router.delete("", response_model=NotificationsCleared)
def clear_notifications(store: DocumentStore = STORE_DEP) -> NotificationsCleared:
    notifications.clear_notifications(store)
    return NotificationsCleared()
