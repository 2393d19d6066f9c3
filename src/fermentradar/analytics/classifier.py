"""Urgency labels from the stress / feed-interval ratio."""

from __future__ import annotations

import math
from enum import Enum


class StatusLabel(str, Enum):
    UNKNOWN = "unknown"
    HAPPY = "happy"
    DUE_SOON = "due_soon"
    NEEDS_FEED = "needs_feed"


# Half-open thresholds: [0, 0.7) happy, [0.7, 1.0) due soon, [1.0, ∞) needs feed
DUE_SOON_RATIO = 0.7
NEEDS_FEED_RATIO = 1.0


def stress_ratio(stress: float, base_feed_interval_hours: float) -> float:
    """stress / base interval.

    Returns NaN when either value is not numeric or the interval is not a
    finite positive number, so degenerate records classify as unknown.
    """
    try:
        stress = float(stress)
        interval = float(base_feed_interval_hours)
    except (TypeError, ValueError):
        return math.nan
    if not (math.isfinite(interval) and interval > 0):
        return math.nan
    return stress / interval


def classify_ratio(ratio: float) -> StatusLabel:
    """Map a ratio onto a status label.  Never raises."""
    try:
        finite = math.isfinite(ratio)
    except TypeError:
        finite = False
    if not finite:
        return StatusLabel.UNKNOWN
    if ratio < DUE_SOON_RATIO:
        return StatusLabel.HAPPY
    if ratio < NEEDS_FEED_RATIO:
        return StatusLabel.DUE_SOON
    return StatusLabel.NEEDS_FEED
