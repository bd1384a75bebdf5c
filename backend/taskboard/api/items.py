"""Item lifecycle, move, comment and subtask endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from taskboard.api.deps import CALLER_DEP, STORE_DEP
from taskboard.schemas.board import Comment, Item, Subtask
from taskboard.schemas.items import (
    CommentCreate,
    ItemCreate,
    ItemMove,
    ItemUpdate,
    MoveResult,
    SubtaskCreate,
    SubtaskUpdate,
)
from taskboard.services import lifecycle, moves

if TYPE_CHECKING:
    from taskboard.api.deps import CallerHeaders
    from taskboard.services.store import DocumentStore

router = APIRouter(prefix="/items", tags=["items"])


@router.post("", response_model=Item)
def create_item(
    payload: ItemCreate,
    store: DocumentStore = STORE_DEP,
    caller: CallerHeaders = CALLER_DEP,
) -> Item:
    """Create an item in `todo` (or the requested column)."""
    return lifecycle.create_item(store, payload, identity_hints=caller.creator_hints())


@router.put("/{item_id}", response_model=Item)
def update_item(
    item_id: str,
    payload: ItemUpdate,
    store: DocumentStore = STORE_DEP,
    caller: CallerHeaders = CALLER_DEP,
) -> Item:
    """Apply a partial update; only fields present in the body change."""
    actor = caller.actor_or(payload.updated_by)
    return lifecycle.update_item(store, item_id, payload, actor=actor)


@router.post("/{item_id}/move", response_model=MoveResult)
def move_item(
    item_id: str,
    payload: ItemMove,
    store: DocumentStore = STORE_DEP,
) -> MoveResult:
    """Move an item to another column or reorder it within its own."""
    return moves.move_item(
        store,
        item_id,
        payload.to_column_id,
        position=payload.position,
        moved_by=payload.moved_by,
    )


@router.delete("/{item_id}", response_model=Item)
def delete_item(
    item_id: str,
    store: DocumentStore = STORE_DEP,
    caller: CallerHeaders = CALLER_DEP,
) -> Item:
    return lifecycle.delete_item(store, item_id, actor=caller.actor_or())


@router.post("/{item_id}/comments", response_model=Comment)
def add_comment(
    item_id: str,
    payload: CommentCreate,
    store: DocumentStore = STORE_DEP,
) -> Comment:
    """Comment on an item; `@agent` mentions notify the named agents."""
    return lifecycle.add_comment(store, item_id, payload.text, author=payload.author)


@router.post("/{item_id}/subtasks", response_model=Subtask)
def add_subtask(
    item_id: str,
    payload: SubtaskCreate,
    store: DocumentStore = STORE_DEP,
    caller: CallerHeaders = CALLER_DEP,
) -> Subtask:
    return lifecycle.add_subtask(store, item_id, payload.text, actor=caller.actor_or())


@router.put("/{item_id}/subtasks/{subtask_id}", response_model=Subtask)
def update_subtask(
    item_id: str,
    subtask_id: str,
    payload: SubtaskUpdate,
    store: DocumentStore = STORE_DEP,
    caller: CallerHeaders = CALLER_DEP,
) -> Subtask:
    return lifecycle.update_subtask(
        store,
        item_id,
        subtask_id,
        payload,
        actor=caller.actor_or(),
    )


@router.delete("/{item_id}/subtasks/{subtask_id}", response_model=Subtask)
def delete_subtask(
    item_id: str,
    subtask_id: str,
    store: DocumentStore = STORE_DEP,
    caller: CallerHeaders = CALLER_DEP,
) -> Subtask:
    return lifecycle.delete_subtask(store, item_id, subtask_id, actor=caller.actor_or())
