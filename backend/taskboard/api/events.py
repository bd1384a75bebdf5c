"""Audit event query endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Query

from taskboard.api.deps import STORE_DEP
from taskboard.schemas.events import EventListResponse, EventType
from taskboard.services.events import query_events

if TYPE_CHECKING:
    from taskboard.services.store import DocumentStore

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventListResponse)
def list_events(
    store: DocumentStore = STORE_DEP,
    event_type: str | None = Query(default=None, alias="type"),
    actor: str | None = None,
    item_id: str | None = Query(default=None, alias="itemId"),
    since: datetime | None = None,
    limit: int | None = Query(default=None, ge=0),
) -> EventListResponse:
    """Query the audit trail, newest first."""
    events = query_events(
        store,
        event_type=event_type,
        actor=actor,
        item_id=item_id,
        since=since,
        limit=limit,
    )
    return EventListResponse(events=events)


@router.get("/types", response_model=list[str])
def list_event_types() -> list[str]:
    return [event_type.value for event_type in EventType]
