"""Known collaborator identities, agents, and `@mention` alias resolution."""

from __future__ import annotations

import re
from enum import Enum


class Identity(str, Enum):
    """Human collaborators that can own, block, or review board items."""

    KENNY = "kenny"
    JIMMY = "jimmy"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Agent(str, Enum):
    """Automated collaborators addressable from comment mentions."""

    PM = "pm"
    DEV = "dev"
    QA = "qa"


# Kenny reviews work; Jimmy operates the board and is the fallback creator.
REVIEWER = Identity.KENNY
OPERATOR = Identity.JIMMY

SYSTEM_AUTHOR = "system"
UNKNOWN_ACTOR = "unknown"
IDENTITY_PLACEHOLDERS = frozenset({"", "unknown", "null", "undefined"})
_KNOWN_IDENTITIES = frozenset(identity.value for identity in Identity)

MENTION_ALIASES: dict[str, Agent] = {
    "jimmy": Agent.PM,
    "pm": Agent.PM,
    "claude": Agent.PM,
    "dev": Agent.DEV,
    "codex": Agent.DEV,
    "qa": Agent.QA,
    "gemini": Agent.QA,
}
MENTION_PATTERN = re.compile(
    r"@(?P<alias>" + "|".join(MENTION_ALIASES) + r")\b",
    re.IGNORECASE,
)


def is_known_identity(value: str) -> bool:
    return value in _KNOWN_IDENTITIES


def display_name(identity: str | None) -> str:
    """Human-facing name for an identity; unknown values are echoed back."""
    if not identity:
        return "Unknown"
    if is_known_identity(identity):
        return Identity(identity).display_name
    return identity


def resolve_alias(alias: str) -> Agent | None:
    return MENTION_ALIASES.get(alias.lower())


def mentioned_agents(text: str) -> list[Agent]:
    """Distinct agents mentioned in `text`, in order of first mention."""
    agents: dict[Agent, None] = {}
    for match in MENTION_PATTERN.finditer(text):
        agent = resolve_alias(match.group("alias"))
        if agent is not None:
            agents.setdefault(agent, None)
    return list(agents)


def clean_identity(value: object | None) -> str:
    """Trim and lowercase an identity hint; placeholders collapse to ``""``."""
    if value is None:
        return ""
    normalized = str(value).strip().lower()
    if normalized in IDENTITY_PLACEHOLDERS:
        return ""
    return normalized
