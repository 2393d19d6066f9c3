"""Feeding records, location-change events, and timestamp handling.

These are read-only snapshots handed to the stress computation by
whatever owns persistence (see :mod:`fermentradar.store`).  Timestamps
may arrive as ``datetime`` objects or ISO-8601 strings straight from
storage; anything that does not parse is reported as ``None`` rather
than raised, so callers can degrade to an "unknown" status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from fermentradar.locations import COUNTER

Timestamp = Union[datetime, str]

SECONDS_PER_HOUR = 3600.0


class EventKind(str, Enum):
    """Kinds of ferment events written to the event log."""

    FEED = "feed"
    MOVE = "move"


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp into an aware UTC-comparable datetime.

    Accepts ``datetime`` instances and ISO-8601 strings (a trailing ``Z``
    is read as UTC).  Naive values are taken to be UTC.

    Returns:
        The parsed datetime, or None if the value is missing or malformed.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def hours_between(start: datetime, end: datetime) -> float:
    """Signed wall-clock hours from *start* to *end*."""
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def format_timestamp(dt: datetime) -> str:
    """ISO-8601 string used when writing timestamps to storage."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeedingRecord:
    """What the stress computation needs to know about one ferment."""

    base_feed_interval_hours: float
    last_fed_at: Timestamp | None
    storage_location: str | None = COUNTER  # location in effect at last feed

    def __repr__(self) -> str:
        return (
            f"FeedingRecord(every {self.base_feed_interval_hours}h, "
            f"fed={self.last_fed_at}, at={self.storage_location})"
        )


@dataclass(frozen=True)
class LocationChangeEvent:
    """A single entry from a ferment's event log."""

    occurred_at: Timestamp | None
    new_location: str | None = None
    kind: EventKind = EventKind.MOVE
    ferment_id: str | None = None

    @property
    def is_move(self) -> bool:
        return self.kind == EventKind.MOVE

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        occurred = self.occurred_at
        if isinstance(occurred, datetime):
            occurred = format_timestamp(occurred)
        return {
            "ferment_id": self.ferment_id,
            "kind": EventKind(self.kind).value,
            "new_location": self.new_location,
            "occurred_at": occurred,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LocationChangeEvent:
        """Build an event from a stored dict.

        Raises:
            ValueError: If the ``kind`` field is not a known event kind.
        """
        return cls(
            occurred_at=data.get("occurred_at"),
            new_location=data.get("new_location"),
            kind=EventKind(data.get("kind", EventKind.MOVE.value)),
            ferment_id=data.get("ferment_id"),
        )

    def __repr__(self) -> str:
        target = self.new_location or "-"
        kind = getattr(self.kind, "value", self.kind)
        return f"LocationChangeEvent({kind} → {target} @ {self.occurred_at})"
