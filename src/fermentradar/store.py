"""File-backed storage for ferments and their event log.

Layout of a store directory::

    ferments.json   -- list of ferment dicts, rewritten on every change
    events.jsonl    -- append-only event log, one JSON object per line

Every mutating call takes the current time explicitly so actions can be
replayed deterministically in tests.
"""

from __future__ import annotations

import json
import math
import uuid
from dataclasses import dataclass, asdict, replace
from datetime import datetime
from pathlib import Path
from typing import Any

from fermentradar.locations import COUNTER
from fermentradar.models import (
    EventKind,
    FeedingRecord,
    LocationChangeEvent,
    format_timestamp,
)

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"

FERMENTS_FILE = "ferments.json"
EVENTS_FILE = "events.jsonl"

DEFAULT_FEED_INTERVAL_HOURS = 16.0
DEFAULT_TYPE = "sourdough"
FERMENT_TYPES = ("sourdough", "kombucha")


@dataclass(frozen=True)
class Ferment:
    """A stored ferment row."""

    id: str
    name: str
    type: str
    storage_location: str  # where it is now
    fed_location: str  # where it was when last fed
    base_feed_interval_hours: float
    last_fed_at: str
    started_at: str
    created_at: str

    def feeding_record(self) -> FeedingRecord:
        """Snapshot for the status computation."""
        return FeedingRecord(
            base_feed_interval_hours=self.base_feed_interval_hours,
            last_fed_at=self.last_fed_at,
            storage_location=self.fed_location,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Ferment:
        location = data.get("storage_location") or COUNTER
        return cls(
            id=data["id"],
            name=data["name"],
            type=data.get("type", DEFAULT_TYPE),
            storage_location=location,
            fed_location=data.get("fed_location") or location,
            base_feed_interval_hours=data.get(
                "base_feed_interval_hours", DEFAULT_FEED_INTERVAL_HOURS
            ),
            last_fed_at=data.get("last_fed_at", ""),
            started_at=data.get("started_at", ""),
            created_at=data.get("created_at", ""),
        )


class FermentStore:
    """Ferments and their events under a single directory."""

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root is not None else DATA_DIR
        self.ferments_path = self.root / FERMENTS_FILE
        self.events_path = self.root / EVENTS_FILE

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_ferments(self) -> list[Ferment]:
        """All ferments in creation order."""
        if not self.ferments_path.exists():
            return []
        with open(self.ferments_path) as f:
            rows = json.load(f)
        return [Ferment.from_dict(row) for row in rows]

    def get(self, ferment_id: str) -> Ferment:
        """Look up a ferment by id (a unique id prefix also matches).

        Raises:
            KeyError: If no ferment, or more than one, matches.
        """
        ferments = self.list_ferments()
        for ferment in ferments:
            if ferment.id == ferment_id:
                return ferment
        matches = [f for f in ferments if f.id.startswith(ferment_id)]
        if len(matches) != 1:
            raise KeyError(ferment_id)
        return matches[0]

    def events(self) -> list[LocationChangeEvent]:
        """Read the whole event log, skipping lines that don't parse."""
        if not self.events_path.exists():
            return []

        events: list[LocationChangeEvent] = []
        with open(self.events_path) as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    events.append(LocationChangeEvent.from_dict(json.loads(line)))
                except (json.JSONDecodeError, ValueError, AttributeError):
                    continue
        return events

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        now: datetime,
        type: str = DEFAULT_TYPE,
        storage_location: str = COUNTER,
        base_feed_interval_hours: float | None = None,
        started_at: datetime | None = None,
    ) -> Ferment:
        """Create a ferment, counted as fed at *now*.

        Raises:
            ValueError: If the name is blank or the interval is not positive.
        """
        name = name.strip()
        if not name:
            raise ValueError("ferment name must not be empty")
        if base_feed_interval_hours is None:
            base_feed_interval_hours = DEFAULT_FEED_INTERVAL_HOURS
        if not (math.isfinite(base_feed_interval_hours) and base_feed_interval_hours > 0):
            raise ValueError(
                f"feed interval must be a positive number of hours, got {base_feed_interval_hours}"
            )

        stamp = format_timestamp(now)
        ferment = Ferment(
            id=uuid.uuid4().hex,
            name=name,
            type=type,
            storage_location=storage_location,
            fed_location=storage_location,
            base_feed_interval_hours=float(base_feed_interval_hours),
            last_fed_at=stamp,
            started_at=format_timestamp(started_at) if started_at else stamp,
            created_at=stamp,
        )
        self._save(self.list_ferments() + [ferment])
        return ferment

    def feed(self, ferment_id: str, now: datetime) -> Ferment:
        """Record a feed: resets the stress clock at the current location."""
        ferment = self.get(ferment_id)
        updated = replace(
            ferment,
            last_fed_at=format_timestamp(now),
            fed_location=ferment.storage_location,
        )
        self._update(updated)
        self._append_event(
            LocationChangeEvent(now, None, EventKind.FEED, ferment.id)
        )
        return updated

    def move(self, ferment_id: str, to: str, now: datetime) -> Ferment:
        """Move a ferment to another storage location."""
        ferment = self.get(ferment_id)
        updated = replace(ferment, storage_location=to)
        self._update(updated)
        self._append_event(
            LocationChangeEvent(now, to, EventKind.MOVE, ferment.id)
        )
        return updated

    def _update(self, ferment: Ferment) -> None:
        rows = [ferment if f.id == ferment.id else f for f in self.list_ferments()]
        self._save(rows)

    def _save(self, ferments: list[Ferment]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        tmp = self.ferments_path.with_suffix(".tmp")
        with open(tmp, "w") as f:
            json.dump([fm.to_dict() for fm in ferments], f, indent=2)
        tmp.replace(self.ferments_path)

    def _append_event(self, event: LocationChangeEvent) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self.events_path, "a") as f:
            f.write(json.dumps(event.to_dict()) + "\n")
