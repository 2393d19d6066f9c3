"""Group a flat event log into per-ferment move histories."""

from __future__ import annotations

from typing import Iterable

from fermentradar.models import LocationChangeEvent


def moves_by_ferment(
    events: Iterable[LocationChangeEvent],
    ferment_ids: Iterable[str] | None = None,
) -> dict[str, list[LocationChangeEvent]]:
    """Bin move events by the ferment they belong to.

    Args:
        events: Flat event log (any order, any kinds).
        ferment_ids: If given, every id gets an entry (possibly empty) and
            events for other ferments are dropped.

    Returns:
        ferment id → list of its move events, in log order.
    """
    grouped: dict[str, list[LocationChangeEvent]] = {}
    if ferment_ids is not None:
        grouped = {fid: [] for fid in ferment_ids}

    for ev in events:
        if not ev.is_move or ev.ferment_id is None:
            continue
        if ferment_ids is not None and ev.ferment_id not in grouped:
            continue
        grouped.setdefault(ev.ferment_id, []).append(ev)

    return grouped
