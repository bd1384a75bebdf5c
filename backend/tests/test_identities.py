# ruff: noqa: INP001
"""Identity helpers, mention parsing and identifier generation."""

from __future__ import annotations

import re

from taskboard.core import ids
from taskboard.core.identities import (
    Agent,
    clean_identity,
    display_name,
    mentioned_agents,
    resolve_alias,
)
from taskboard.core.ids import unique_id


def test_aliases_resolve_to_agents() -> None:
    assert resolve_alias("claude") is Agent.PM
    assert resolve_alias("JIMMY") is Agent.PM
    assert resolve_alias("codex") is Agent.DEV
    assert resolve_alias("gemini") is Agent.QA
    assert resolve_alias("kenny") is None


def test_two_aliases_for_one_agent_count_once() -> None:
    assert mentioned_agents("@dev please review @codex") == [Agent.DEV]


def test_mentions_keep_first_seen_order_and_ignore_case() -> None:
    assert mentioned_agents("@QA then @Claude then @gemini") == [Agent.QA, Agent.PM]


def test_mentions_need_a_word_boundary() -> None:
    assert mentioned_agents("ping @developer and @qaz") == []
    assert mentioned_agents("email pm@example.com") == []


def test_display_name() -> None:
    assert display_name("kenny") == "Kenny"
    assert display_name("jimmy") == "Jimmy"
    assert display_name("dev") == "dev"
    assert display_name(None) == "Unknown"


def test_clean_identity_drops_placeholders() -> None:
    assert clean_identity("  Kenny ") == "kenny"
    for placeholder in ("unknown", "NULL", "undefined", "   ", None):
        assert clean_identity(placeholder) == ""


def test_unique_id_shape() -> None:
    value = unique_id("item")
    assert re.fullmatch(r"item-\d+-[0-9a-f]{8}", value)


def test_unique_ids_differ_within_the_same_millisecond(monkeypatch) -> None:
    monkeypatch.setattr(ids, "epoch_ms", lambda: 1_700_000_000_000)
    generated = {unique_id("evt") for _ in range(500)}
    assert len(generated) == 500
    assert all(value.startswith("evt-1700000000000-") for value in generated)
