# ruff: noqa: INP001
"""Stage time, cycle time and board aggregates."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from taskboard.schemas.board import Board, Item, StageEntry
from taskboard.services.metrics import board_metrics, cycle_time, stage_time, to_hours

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
HOUR = timedelta(hours=1)


def _item(item_id: str, *stages: tuple[str, datetime], assignee: str | None = "jimmy") -> Item:
    return Item(
        id=item_id,
        number=1,
        title=item_id.title(),
        created_by="jimmy",
        assignee=assignee,
        stage_history=[StageEntry(column=column, entered_at=at) for column, at in stages],
    )


def _board(**columns: list[Item]) -> Board:
    board = Board.empty()
    for column_id, items in columns.items():
        board.column(column_id).items.extend(items)
    return board


def test_stage_time_sums_repeat_visits_and_measures_open_stage() -> None:
    item = _item(
        "loop",
        ("todo", T0),
        ("doing", T0 + HOUR),
        ("todo", T0 + 3 * HOUR),
        ("doing", T0 + 4 * HOUR),
    )

    durations = stage_time(item, now=T0 + 10 * HOUR)

    assert durations == {
        "todo": 2 * 3_600_000,
        "doing": 2 * 3_600_000 + 6 * 3_600_000,
    }


def test_stage_time_of_empty_history() -> None:
    assert stage_time(_item("empty"), now=T0) == {}


def test_cycle_time_is_exact_milliseconds() -> None:
    item = _item(
        "shipped",
        ("backlog", T0 - HOUR),
        ("todo", T0),
        ("done", T0 + timedelta(hours=5, milliseconds=7)),
        ("todo", T0 + 6 * HOUR),
        ("done", T0 + 9 * HOUR),
    )

    assert cycle_time(item) == 5 * 3_600_000 + 7


def test_cycle_time_is_none_without_todo_or_done() -> None:
    assert cycle_time(_item("never-done", ("todo", T0), ("doing", T0 + HOUR))) is None
    assert cycle_time(_item("skipped-todo", ("backlog", T0), ("done", T0 + HOUR))) is None


def test_to_hours_rounds_half_up_to_one_decimal() -> None:
    assert to_hours(90 * 60 * 1000) == 1.5
    assert to_hours(3 * 60 * 1000) == 0.1
    assert to_hours(15 * 60 * 1000) == 0.3


def test_board_metrics_aggregates() -> None:
    fast = _item("fast", ("todo", T0), ("doing", T0 + HOUR), ("done", T0 + 2 * HOUR))
    slow = _item(
        "slow",
        ("todo", T0),
        ("done", T0 + 4 * HOUR + timedelta(days=1)),
        assignee="kenny",
    )
    no_todo = _item("no-todo", ("backlog", T0), ("done", T0 + HOUR), assignee=None)
    board = _board(
        backlog=[_item("idea", ("backlog", T0), assignee="dev")],
        doing=[_item("wip", ("todo", T0), ("doing", T0 + HOUR))],
        review=[_item("check", ("review", T0), assignee="kenny")],
        done=[fast, slow, no_todo],
    )
    now = T0 + 3 * 24 * HOUR

    metrics = board_metrics(board, now=now)

    assert metrics.total_tasks == 6
    assert metrics.completed_tasks == 3
    assert metrics.tasks_in_progress == 1
    assert metrics.tasks_in_review == 1
    assert metrics.tasks_by_column == {"backlog": 1, "todo": 0, "doing": 1, "review": 1, "done": 3}
    assert metrics.tasks_by_assignee == {"kenny": 2, "jimmy": 2, "unassigned": 2}

    assert [(entry.id, entry.cycle_time) for entry in metrics.cycle_times] == [
        ("fast", 2 * 3_600_000),
        ("slow", 28 * 3_600_000),
    ]
    assert metrics.cycle_times[1].cycle_time_hours == 28.0
    assert metrics.avg_cycle_time == 15 * 3_600_000
    assert metrics.avg_cycle_time_hours == 15.0

    assert metrics.avg_time_per_stage["doing"].count == 1
    assert metrics.avg_time_per_stage["doing"].avg_ms == 3_600_000
    assert metrics.avg_time_per_stage["todo"].count == 2
    assert metrics.avg_time_per_stage["todo"].avg_ms == 52_200_000
    assert metrics.avg_time_per_stage["todo"].avg_hours == 14.5
    assert metrics.avg_time_per_stage["backlog"].count == 1
    assert metrics.avg_time_per_stage["done"].count == 3

    assert metrics.throughput_by_day == {"2024-03-01": 2, "2024-03-02": 1}


def test_empty_board_metrics() -> None:
    metrics = board_metrics(Board.empty(), now=T0)

    assert metrics.total_tasks == 0
    assert metrics.avg_cycle_time is None
    assert metrics.avg_cycle_time_hours is None
    assert metrics.cycle_times == []
    assert metrics.avg_time_per_stage == {}
    assert metrics.tasks_by_assignee == {"kenny": 0, "jimmy": 0, "unassigned": 0}


def test_assignees_outside_the_known_identities_count_as_unassigned() -> None:
    board = _board(
        todo=[
            _item("mine", ("todo", T0), assignee="kenny"),
            _item("agent", ("todo", T0), assignee="qa"),
            _item("nobody", ("todo", T0), assignee=None),
        ],
    )

    metrics = board_metrics(board, now=T0)

    assert metrics.tasks_by_assignee == {"kenny": 1, "jimmy": 0, "unassigned": 2}
