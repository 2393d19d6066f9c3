"""Fermentation stress accumulation across storage-location changes.

Stress is measured in baseline hours: one hour on the counter adds one
unit, one hour in the fridge adds a third of a unit.  The time since the
last feed is split into segments wherever a move changes the speed and each
segment is weighted by the speed of the location in effect during it.

Nothing here reads the clock; the reference time is always passed in.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

import numpy as np

from fermentradar.locations import speed_multiplier
from fermentradar.models import (
    LocationChangeEvent,
    Timestamp,
    hours_between,
    parse_timestamp,
)


def _sorted_moves(
    events: Iterable[LocationChangeEvent],
) -> list[tuple[datetime, LocationChangeEvent]]:
    """Parse event times and return move events in time order.

    Feed events and events whose timestamp does not parse are dropped.
    The sort is stable, so events sharing a timestamp keep their order.
    """
    timed = []
    for ev in events:
        if not ev.is_move:
            continue
        t = parse_timestamp(ev.occurred_at)
        if t is None:
            continue
        timed.append((t, ev))
    timed.sort(key=lambda pair: pair[0])
    return timed


def _breakpoints(
    fed_at: datetime,
    initial_location: str | None,
    events: Iterable[LocationChangeEvent],
) -> tuple[list[datetime], list[str | None], datetime]:
    """Walk the event timeline from the last feed.

    A breakpoint is only recorded where the speed changes; null-location
    markers and moves between equally fast locations still advance the
    cursor but leave the segment running.

    Returns:
        ``(times, locations, cursor)`` where ``locations[i]`` is the
        location in effect from ``times[i]`` until the next breakpoint (or
        onwards for the last one), ``times[0]`` is always the feed time and
        *cursor* is the latest event instant walked.
    """
    times = [fed_at]
    locations = [initial_location]
    cursor = fed_at
    current = initial_location

    for t, ev in _sorted_moves(events):
        # At or before the cursor: no duration, no retroactive move
        if t <= cursor:
            continue
        cursor = t
        if ev.new_location:
            current = ev.new_location
        if speed_multiplier(current) != speed_multiplier(locations[-1]):
            times.append(t)
            locations.append(current)

    return times, locations, cursor


def accumulate_stress(
    last_fed_at: Timestamp | None,
    initial_location: str | None,
    events: Iterable[LocationChangeEvent],
    now: Timestamp,
) -> float | None:
    """Integrate elapsed time against location speed since the last feed.

    Args:
        last_fed_at: When the ferment was last fed.
        initial_location: Location in effect at the last feed.
        events: Location-change events for this ferment, in any order.
            Events at or before the feed time are ignored.
        now: Reference time the stress is measured up to.

    Returns:
        Accumulated stress units (>= 0), or None if *last_fed_at* (or
        *now*) is not a valid timestamp.
    """
    fed_at = parse_timestamp(last_fed_at)
    ref = parse_timestamp(now)
    if fed_at is None or ref is None:
        return None

    times, locations, cursor = _breakpoints(fed_at, initial_location, events)

    stress = 0.0
    for i in range(1, len(times)):
        hours = hours_between(times[i - 1], times[i])
        if hours > 0:
            stress += hours * speed_multiplier(locations[i - 1])

    # Final segment: last breakpoint -> now, or to the last event if that
    # lies beyond now (time up to every walked event is always counted)
    hours = hours_between(times[-1], max(ref, cursor))
    if hours > 0:
        stress += hours * speed_multiplier(locations[-1])

    return stress


def stress_curve(
    last_fed_at: Timestamp | None,
    initial_location: str | None,
    events: Iterable[LocationChangeEvent],
    times: Sequence[Timestamp],
) -> np.ndarray:
    """Evaluate the stress progression at many instants at once.

    The value at each instant counts only the events that had happened by
    then, so the curve is the piecewise-linear path stress actually took.
    From the last event onwards it matches :func:`accumulate_stress`.

    Args:
        last_fed_at: When the ferment was last fed.
        initial_location: Location in effect at the last feed.
        events: Location-change events for this ferment, in any order.
        times: Instants to evaluate.

    Returns:
        Float array the same length as *times*.  Instants before the feed
        give 0; unparseable instants (or an unparseable feed time) give NaN.
    """
    out = np.full(len(times), np.nan, dtype=np.float64)
    fed_at = parse_timestamp(last_fed_at)
    if fed_at is None or len(times) == 0:
        return out

    bp_times, locations, _ = _breakpoints(fed_at, initial_location, events)
    offsets = np.array([hours_between(fed_at, t) for t in bp_times], dtype=np.float64)
    rates = np.array([speed_multiplier(loc) for loc in locations], dtype=np.float64)

    # Cumulative stress at each breakpoint
    cumulative = np.zeros(len(bp_times), dtype=np.float64)
    if len(bp_times) > 1:
        cumulative[1:] = np.cumsum(np.diff(offsets) * rates[:-1])

    query = np.full(len(times), np.nan, dtype=np.float64)
    for i, value in enumerate(times):
        t = parse_timestamp(value)
        if t is not None:
            query[i] = hours_between(fed_at, t)

    valid = ~np.isnan(query)
    idx = np.searchsorted(offsets, query[valid], side="right") - 1
    before_feed = idx < 0
    idx = np.clip(idx, 0, None)
    values = cumulative[idx] + (query[valid] - offsets[idx]) * rates[idx]
    values[before_feed] = 0.0
    out[valid] = values
    return out
