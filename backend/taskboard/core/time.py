"""Time helpers shared by the board engine and its persisted documents."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

_ONE_MS = timedelta(milliseconds=1)


def utcnow() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(UTC)


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Whole milliseconds between two timestamps (negative if `end` precedes `start`)."""
    return (end - start) // _ONE_MS


def epoch_ms(value: datetime | None = None) -> int:
    moment = value or utcnow()
    return int(moment.timestamp() * 1000)


def filename_stamp(value: datetime | None = None) -> str:
    """ISO-8601 stamp safe for use in file names (`:` and `.` replaced by `-`)."""
    moment = (value or utcnow()).astimezone(UTC)
    iso = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")
