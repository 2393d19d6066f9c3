"""Shared fixtures and helpers for the fermentradar test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from fermentradar.locations import COUNTER
from fermentradar.models import EventKind, FeedingRecord, LocationChangeEvent
from fermentradar.store import FermentStore


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------

T0 = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


def at(hours: float) -> datetime:
    """T0 plus a number of hours."""
    return T0 + timedelta(hours=hours)


# ---------------------------------------------------------------------------
# Record / event builders
# ---------------------------------------------------------------------------


def make_record(
    interval: float = 16.0,
    last_fed_at=T0,
    location: str | None = COUNTER,
) -> FeedingRecord:
    """Build a FeedingRecord fed at T0 on the counter by default."""
    return FeedingRecord(
        base_feed_interval_hours=interval,
        last_fed_at=last_fed_at,
        storage_location=location,
    )


def make_move(
    hours: float,
    to: str | None,
    ferment_id: str | None = "f1",
) -> LocationChangeEvent:
    """A move event *hours* after T0."""
    return LocationChangeEvent(at(hours), to, EventKind.MOVE, ferment_id)


def make_feed(hours: float, ferment_id: str | None = "f1") -> LocationChangeEvent:
    """A feed event *hours* after T0."""
    return LocationChangeEvent(at(hours), None, EventKind.FEED, ferment_id)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store(tmp_path) -> FermentStore:
    """An empty store in a temp directory."""
    return FermentStore(tmp_path / "store")
