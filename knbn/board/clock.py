"""Current-instant source and timestamp parsing.

Timestamps travel through the board as ISO-8601 strings. They are only
ever compared after parsing, never as raw strings.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], str]

_EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render an instant the way every board timestamp is stored."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def system_clock() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def fixed_clock(value: str) -> Clock:
    """Clock that always answers ``value``. Used by tests and replays."""

    def _clock() -> str:
        return value

    return _clock


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a stored timestamp into an aware datetime (naive means UTC)."""
    if isinstance(value, datetime):
        moment = value
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def timestamp_or_min(value) -> datetime:
    """Like parse_timestamp, but unreadable values become the oldest instant."""
    if value is None:
        return _EPOCH_MIN
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        return _EPOCH_MIN
