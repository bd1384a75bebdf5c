"""Board metrics response schemas."""

from __future__ import annotations

from sqlmodel import Field, SQLModel


class CycleTimeEntry(SQLModel):
    """Cycle time of one completed item."""

    id: str
    title: str
    cycle_time: int
    cycle_time_hours: float


class StageAverage(SQLModel):
    """Average time completed items spent in one stage."""

    avg_ms: int
    avg_hours: float
    count: int


class BoardMetrics(SQLModel):
    """Derived board statistics, recomputed on every request."""

    total_tasks: int = 0
    completed_tasks: int = 0
    tasks_in_progress: int = 0
    tasks_in_review: int = 0
    tasks_by_column: dict[str, int] = Field(default_factory=dict)
    tasks_by_assignee: dict[str, int] = Field(default_factory=dict)
    avg_cycle_time: float | None = None
    avg_cycle_time_hours: float | None = None
    cycle_times: list[CycleTimeEntry] = Field(default_factory=list)
    avg_time_per_stage: dict[str, StageAverage] = Field(default_factory=dict)
    throughput_by_day: dict[str, int] = Field(default_factory=dict)
