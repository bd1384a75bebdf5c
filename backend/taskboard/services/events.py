"""Append-only, capped audit event log."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from taskboard.core.config import settings
from taskboard.core.ids import unique_id
from taskboard.core.identities import SYSTEM_AUTHOR
from taskboard.core.logging import get_logger
from taskboard.core.time import utcnow
from taskboard.schemas.events import Event, EventType

if TYPE_CHECKING:
    from taskboard.services.store import DocumentStore

logger = get_logger(__name__)


def record_event(
    store: DocumentStore,
    event_type: EventType,
    payload: dict[str, object] | None = None,
    actor: str = SYSTEM_AUTHOR,
) -> Event:
    """Append an event, evicting the oldest entries beyond the configured cap."""
    event = Event(
        id=unique_id("evt"),
        type=event_type,
        timestamp=utcnow(),
        actor=actor or SYSTEM_AUTHOR,
        payload=payload or {},
    )
    with store.locked():
        document = store.load_events()
        document.events.append(event)
        overflow = len(document.events) - settings.event_log_cap
        if overflow > 0:
            del document.events[:overflow]
        store.save_events(document)
    logger.debug(
        "board.event.recorded",
        extra={"event_type": event_type.value, "actor": event.actor},
    )
    return event


def query_events(
    store: DocumentStore,
    *,
    event_type: EventType | str | None = None,
    actor: str | None = None,
    item_id: str | None = None,
    since: datetime | None = None,
    limit: int | None = None,
) -> list[Event]:
    """Return matching events, newest first.

    Events sharing a timestamp come back most-recently-appended first. A
    missing or zero `limit` means the configured default.
    """
    events = store.load_events().events
    if event_type:
        wanted = event_type.value if isinstance(event_type, EventType) else event_type
        events = [event for event in events if event.type.value == wanted]
    if actor:
        events = [event for event in events if event.actor == actor]
    if item_id:
        events = [event for event in events if event.payload.get("item_id") == item_id]
    if since is not None:
        if since.tzinfo is None:
            since = since.replace(tzinfo=UTC)
        events = [event for event in events if event.timestamp > since]
    ordered = sorted(reversed(events), key=lambda event: event.timestamp, reverse=True)
    return ordered[: limit or settings.event_query_default_limit]
