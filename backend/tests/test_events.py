# ruff: noqa: INP001
"""Event log retention and queries."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from taskboard.core.config import settings
from taskboard.schemas.events import Event, EventLogDocument, EventType
from taskboard.services import events as events_module
from taskboard.services.events import query_events, record_event
from taskboard.services.store import DocumentStore

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


def _seed(store: DocumentStore, *events: Event) -> None:
    store.save_events(EventLogDocument(events=list(events)))


def _event(event_id: str, minutes: int, **fields: object) -> Event:
    return Event(id=event_id, timestamp=T0 + timedelta(minutes=minutes), **fields)


def test_record_event_defaults_to_system_actor(store: DocumentStore) -> None:
    event = record_event(store, EventType.ITEM_CREATED, {"item_id": "item-1"})

    assert event.actor == "system"
    assert event.id.startswith("evt-")
    assert [e.id for e in store.load_events().events] == [event.id]


def test_log_keeps_only_the_newest_entries(store: DocumentStore) -> None:
    for index in range(1005):
        record_event(store, EventType.ITEM_UPDATED, {"n": index})

    stored = store.load_events().events
    assert len(stored) == 1000
    assert [event.payload["n"] for event in stored] == list(range(5, 1005))


def test_cap_follows_settings(store: DocumentStore, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "event_log_cap", 3)
    for index in range(5):
        record_event(store, EventType.ITEM_UPDATED, {"n": index})

    assert [event.payload["n"] for event in store.load_events().events] == [2, 3, 4]


def test_query_filters(store: DocumentStore) -> None:
    _seed(
        store,
        _event("e1", 0, type=EventType.ITEM_CREATED, actor="jimmy", payload={"item_id": "a"}),
        _event("e2", 1, type=EventType.ITEM_MOVED, actor="kenny", payload={"item_id": "a"}),
        _event("e3", 2, type=EventType.ITEM_MOVED, actor="jimmy", payload={"item_id": "b"}),
        _event("e4", 3, type=EventType.COMMENT_ADDED, actor="jimmy", payload={"item_id": "a"}),
    )

    def ids(**filters: object) -> list[str]:
        return [event.id for event in query_events(store, **filters)]

    assert ids() == ["e4", "e3", "e2", "e1"]
    assert ids(event_type=EventType.ITEM_MOVED) == ["e3", "e2"]
    assert ids(event_type="ITEM_MOVED", actor="jimmy") == ["e3"]
    assert ids(item_id="a") == ["e4", "e2", "e1"]
    assert ids(since=T0 + timedelta(minutes=1)) == ["e4", "e3"]
    assert ids(since=(T0 + timedelta(minutes=1)).replace(tzinfo=None)) == ["e4", "e3"]
    assert ids(limit=2) == ["e4", "e3"]
    assert ids(actor="nobody") == []


def test_results_are_newest_first_regardless_of_storage_order(store: DocumentStore) -> None:
    _seed(
        store,
        _event("late", 5, type=EventType.ITEM_CREATED),
        _event("early", 1, type=EventType.ITEM_CREATED),
        _event("tie-first", 3, type=EventType.ITEM_CREATED),
        _event("tie-second", 3, type=EventType.ITEM_CREATED),
    )

    assert [event.id for event in query_events(store)] == [
        "late",
        "tie-second",
        "tie-first",
        "early",
    ]


def test_limit_defaults_to_configured_value(
    store: DocumentStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "event_query_default_limit", 2)
    _seed(store, *(_event(f"e{n}", n, type=EventType.ITEM_UPDATED) for n in range(5)))

    assert len(query_events(store)) == 2
    assert len(query_events(store, limit=0)) == 2
    assert len(query_events(store, limit=4)) == 4


def test_record_event_logs_debug(store: DocumentStore, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[str, dict[str, object]]] = []
    monkeypatch.setattr(
        events_module.logger,
        "debug",
        lambda message, *args, **kwargs: seen.append((message, kwargs.get("extra", {}))),
    )

    record_event(store, EventType.ITEM_DELETED, {}, actor="kenny")

    assert seen == [("board.event.recorded", {"event_type": "ITEM_DELETED", "actor": "kenny"})]
