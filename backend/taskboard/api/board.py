"""Board read, snapshot and metrics endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from taskboard.api.deps import STORE_DEP
from taskboard.schemas.board import BackupHandle, Board
from taskboard.schemas.metrics import BoardMetrics
from taskboard.services.metrics import board_metrics

if TYPE_CHECKING:
    from taskboard.services.store import DocumentStore

router = APIRouter(tags=["board"])


@router.get("/board", response_model=Board)
def get_board(store: DocumentStore = STORE_DEP) -> Board:
    """Return the whole board: columns, items and the ticket counter."""
    return store.load()


@router.post("/board/snapshot", response_model=BackupHandle)
def snapshot_board(store: DocumentStore = STORE_DEP) -> BackupHandle:
    """Write a timestamped backup copy of the board next to the live document."""
    return store.snapshot()


@router.get("/metrics", response_model=BoardMetrics)
def get_metrics(store: DocumentStore = STORE_DEP) -> BoardMetrics:
    """Cycle time, stage time, throughput and distribution statistics."""
    return board_metrics(store.load())
