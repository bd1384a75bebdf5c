"""Client preference storage (free-form JSON object)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body

from taskboard.api.deps import STORE_DEP
from taskboard.schemas.client_settings import SettingsSaved

if TYPE_CHECKING:
    from taskboard.services.store import DocumentStore

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=dict[str, Any])
def get_client_settings(store: DocumentStore = STORE_DEP) -> dict[str, Any]:
    return store.load_client_settings()


@router.post("", response_model=SettingsSaved)
def save_client_settings(
    values: dict[str, Any] = Body(...),
    store: DocumentStore = STORE_DEP,
) -> SettingsSaved:
    """Replace the stored preferences with the request body."""
    store.save_client_settings(values)
    return SettingsSaved()
