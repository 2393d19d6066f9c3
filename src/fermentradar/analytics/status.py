"""Ferment status: stress, ratio and label for one feeding record."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable

from fermentradar.analytics.classifier import (
    StatusLabel,
    classify_ratio,
    stress_ratio,
)
from fermentradar.analytics.stress import accumulate_stress
from fermentradar.models import FeedingRecord, LocationChangeEvent, Timestamp


@dataclass(frozen=True)
class StatusResult:
    """Computed urgency for a ferment at a given instant."""

    stress: float  # baseline hours accumulated since last feed
    ratio: float  # stress / base feed interval
    label: StatusLabel

    @property
    def percent(self) -> int:
        """Ratio as a whole percentage, halves rounded up (0 if non-finite)."""
        value = self.ratio * 100
        if not math.isfinite(value):
            return 0
        return int(math.floor(value + 0.5))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly; NaN becomes None)."""
        return {
            "stress": self.stress if math.isfinite(self.stress) else None,
            "ratio": self.ratio if math.isfinite(self.ratio) else None,
            "label": self.label.value,
        }

    def __repr__(self) -> str:
        return (
            f"StatusResult({self.label.value}, "
            f"stress={self.stress:.2f}, ratio={self.ratio:.0%})"
        )


UNKNOWN_STATUS = StatusResult(stress=0.0, ratio=0.0, label=StatusLabel.UNKNOWN)


def compute_status(
    record: FeedingRecord,
    events: Iterable[LocationChangeEvent],
    now: Timestamp,
) -> StatusResult:
    """Compute a ferment's feeding status.

    Args:
        record: Snapshot of the ferment's feeding record.
        events: Its location-change (move) events, in any order.  Feed
            events and events at or before the last feed are ignored.
        now: Reference time; the caller reads the clock, never this function.

    Returns:
        A fresh StatusResult.  Unparseable feed times give the unknown
        sentinel (stress 0, ratio 0); degenerate intervals give an unknown
        label with a NaN ratio.
    """
    stress = accumulate_stress(
        record.last_fed_at,
        record.storage_location,
        events,
        now,
    )
    if stress is None:
        return UNKNOWN_STATUS

    ratio = stress_ratio(stress, record.base_feed_interval_hours)
    return StatusResult(stress=stress, ratio=ratio, label=classify_ratio(ratio))
