"""Per-ferment board rows.

Combines a stored ferment, its move history and the computed status into
a JSON-serializable row for display.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Iterable

from fermentradar.analytics.status import StatusResult, compute_status
from fermentradar.events import moves_by_ferment
from fermentradar.locations import other_location
from fermentradar.models import LocationChangeEvent, hours_between, parse_timestamp
from fermentradar.store import Ferment

HOURS_PER_DAY = 24.0


@dataclass
class FermentSummary:
    """One ferment as shown on the board."""

    id: str
    name: str
    type: str
    storage_location: str
    base_feed_interval_hours: float
    last_fed_at: str

    # Status
    label: str = "unknown"
    stress: float | None = 0.0
    ratio: float | None = 0.0
    percent: int = 0

    # Wall-clock context (None when the stored timestamp is unreadable)
    age_days: float | None = None
    hours_since_feed: float | None = None

    # Target of the "move" action
    move_to: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"FermentSummary({self.name}: {self.label} "
            f"{self.percent}% @ {self.storage_location})"
        )


def _hours_since(stamp: str, now: datetime) -> float | None:
    start = parse_timestamp(stamp)
    ref = parse_timestamp(now)
    if start is None or ref is None:
        return None
    return hours_between(start, ref)


def summarize_ferment(
    ferment: Ferment,
    moves: Iterable[LocationChangeEvent],
    now: datetime,
) -> FermentSummary:
    """Build the board row for a single ferment."""
    status: StatusResult = compute_status(ferment.feeding_record(), moves, now)
    status_dict = status.to_dict()

    age_hours = _hours_since(ferment.started_at, now)
    since_feed = _hours_since(ferment.last_fed_at, now)

    return FermentSummary(
        id=ferment.id,
        name=ferment.name,
        type=ferment.type,
        storage_location=ferment.storage_location,
        base_feed_interval_hours=ferment.base_feed_interval_hours,
        last_fed_at=ferment.last_fed_at,
        label=status_dict["label"],
        stress=status_dict["stress"],
        ratio=status_dict["ratio"],
        percent=status.percent,
        age_days=round(age_hours / HOURS_PER_DAY, 1) if age_hours is not None else None,
        hours_since_feed=round(since_feed, 1) if since_feed is not None else None,
        move_to=other_location(ferment.storage_location),
    )


def build_board(
    ferments: Iterable[Ferment],
    events: Iterable[LocationChangeEvent],
    now: datetime,
) -> list[FermentSummary]:
    """Summaries for every ferment, in the order given.

    Args:
        ferments: Stored ferments.
        events: The full event log; only each ferment's moves are used.
        now: Reference time shared by every row.

    Returns:
        One FermentSummary per ferment.
    """
    ferments = list(ferments)
    grouped = moves_by_ferment(events, [f.id for f in ferments])
    return [summarize_ferment(f, grouped[f.id], now) for f in ferments]
