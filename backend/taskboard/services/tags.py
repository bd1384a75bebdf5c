"""Tag normalization: every item carries at least one tag."""

from __future__ import annotations

from taskboard.schemas.board import DEFAULT_TAG
from taskboard.services.errors import InvalidInput


def normalize_tags(tags: object | None) -> list[str]:
    """Trim tags and drop blanks; fall back to the triage tag when nothing is left.

    Order is preserved and duplicates are kept.
    """
    if tags is None:
        return [DEFAULT_TAG]
    if not isinstance(tags, list):
        raise InvalidInput("Tags must be an array of strings")
    cleaned = [str(tag).strip() for tag in tags]
    cleaned = [tag for tag in cleaned if tag]
    return cleaned or [DEFAULT_TAG]
