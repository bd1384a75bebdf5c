"""Identifier generation for board entities, events and notifications."""

from __future__ import annotations

import secrets

from taskboard.core.time import epoch_ms

# 4 random bytes -> 8 hex chars; combined with the millisecond stamp this keeps
# concurrent calls within one process from colliding.
_RANDOM_BYTES = 4


def unique_id(prefix: str) -> str:
    """Return `<prefix>-<epoch ms>-<random hex>`, roughly time-ordered."""
    return f"{prefix}-{epoch_ms()}-{secrets.token_hex(_RANDOM_BYTES)}"
