"""Board metrics derived from item stage history.

Everything here is read-only and recomputed from the board on every call.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from taskboard.core.identities import Identity, is_known_identity
from taskboard.core.time import elapsed_ms, utcnow
from taskboard.schemas.board import (
    DEFAULT_COLUMN_ID,
    IN_PROGRESS_COLUMN_ID,
    REVIEW_COLUMN_ID,
    TERMINAL_COLUMN_ID,
)
from taskboard.schemas.metrics import BoardMetrics, CycleTimeEntry, StageAverage

if TYPE_CHECKING:
    from datetime import datetime

    from taskboard.schemas.board import Board, Item

UNASSIGNED_KEY = "unassigned"
_MS_PER_HOUR = 60 * 60 * 1000


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def to_hours(duration_ms: float) -> float:
    """Milliseconds to hours, rounded to one decimal."""
    return _round_half_up(duration_ms / _MS_PER_HOUR, 1)


def _first_entry(item: Item, column_id: str) -> datetime | None:
    return next(
        (entry.entered_at for entry in item.stage_history if entry.column == column_id),
        None,
    )


def stage_time(item: Item, *, now: datetime | None = None) -> dict[str, int]:
    """Milliseconds spent per column; repeat visits are summed.

    The latest entry is still open and is measured up to `now`.
    """
    now = now or utcnow()
    history = item.stage_history
    durations: dict[str, int] = {}
    for index, entry in enumerate(history):
        end = history[index + 1].entered_at if index + 1 < len(history) else now
        durations[entry.column] = durations.get(entry.column, 0) + elapsed_ms(entry.entered_at, end)
    return durations


def cycle_time(item: Item) -> int | None:
    """Milliseconds from first entering todo to first entering done."""
    started = _first_entry(item, DEFAULT_COLUMN_ID)
    finished = _first_entry(item, TERMINAL_COLUMN_ID)
    if started is None or finished is None:
        return None
    return elapsed_ms(started, finished)


def board_metrics(board: Board, *, now: datetime | None = None) -> BoardMetrics:
    now = now or utcnow()
    items = board.all_items()
    column_sizes = {column.id: len(column.items) for column in board.columns}
    done_column = board.column(TERMINAL_COLUMN_ID)
    completed = done_column.items if done_column is not None else []

    by_assignee = {identity.value: 0 for identity in Identity}
    by_assignee[UNASSIGNED_KEY] = 0
    for item in items:
        # Anything but a known identity counts as unassigned.
        known = item.assignee and is_known_identity(item.assignee)
        by_assignee[item.assignee if known else UNASSIGNED_KEY] += 1

    cycle_times: list[CycleTimeEntry] = []
    stage_totals: dict[str, int] = {}
    stage_counts: dict[str, int] = {}
    throughput: dict[str, int] = {}
    for item in completed:
        duration = cycle_time(item)
        if duration is not None:
            cycle_times.append(
                CycleTimeEntry(
                    id=item.id,
                    title=item.title,
                    cycle_time=duration,
                    cycle_time_hours=to_hours(duration),
                ),
            )
        for stage, spent in stage_time(item, now=now).items():
            stage_totals[stage] = stage_totals.get(stage, 0) + spent
            stage_counts[stage] = stage_counts.get(stage, 0) + 1
        finished = _first_entry(item, TERMINAL_COLUMN_ID)
        if finished is not None:
            day = finished.date().isoformat()
            throughput[day] = throughput.get(day, 0) + 1

    metrics = BoardMetrics(
        total_tasks=len(items),
        completed_tasks=len(completed),
        tasks_in_progress=column_sizes.get(IN_PROGRESS_COLUMN_ID, 0),
        tasks_in_review=column_sizes.get(REVIEW_COLUMN_ID, 0),
        tasks_by_column=column_sizes,
        tasks_by_assignee=by_assignee,
        cycle_times=cycle_times,
        throughput_by_day=throughput,
    )
    if cycle_times:
        average = sum(entry.cycle_time for entry in cycle_times) / len(cycle_times)
        metrics.avg_cycle_time = average
        metrics.avg_cycle_time_hours = to_hours(average)
    for stage, total in stage_totals.items():
        count = stage_counts[stage]
        metrics.avg_time_per_stage[stage] = StageAverage(
            avg_ms=int(_round_half_up(total / count)),
            avg_hours=to_hours(total / count),
            count=count,
        )
    return metrics
