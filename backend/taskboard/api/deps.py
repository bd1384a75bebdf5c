"""Reusable FastAPI dependencies for board storage and caller identity.

Identity is whatever the caller claims in headers or body fields; nothing here
authenticates it. Tests swap the store with
`app.dependency_overrides[get_store]`.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from typing import TYPE_CHECKING

from fastapi import Depends, Header

from taskboard.core.config import settings
from taskboard.core.identities import SYSTEM_AUTHOR
from taskboard.services.store import DocumentStore

if TYPE_CHECKING:
    from pathlib import Path


@cache
def store_for(data_dir: Path) -> DocumentStore:
    """One store (and lock) per data directory for the life of the process."""
    return DocumentStore(data_dir)


def get_store() -> DocumentStore:
    return store_for(settings.data_dir)


STORE_DEP = Depends(get_store)


@dataclass(frozen=True)
class CallerHeaders:
    """Identity hints a client may send with a request."""

    user: str | None = None
    user_id: str | None = None
    created_by: str | None = None

    @property
    def actor(self) -> str | None:
        value = (self.user or "").strip()
        return value or None

    def creator_hints(self) -> tuple[str | None, ...]:
        return (self.user, self.user_id, self.created_by)

    def actor_or(self, *fallbacks: str | None) -> str:
        """Header actor, else the first non-empty fallback, else `system`."""
        for candidate in (self.actor, *fallbacks):
            if candidate:
                return candidate
        return SYSTEM_AUTHOR


def get_caller_headers(
    x_user: str | None = Header(default=None, alias="X-User"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_created_by: str | None = Header(default=None, alias="X-Created-By"),
) -> CallerHeaders:
    return CallerHeaders(user=x_user, user_id=x_user_id, created_by=x_created_by)


CALLER_DEP = Depends(get_caller_headers)
