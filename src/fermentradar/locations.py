"""Storage locations and their relative fermentation speed.

Speeds are expressed relative to room temperature (the counter), so a
multiplier of 1.0 accumulates one stress unit per wall-clock hour.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Location tags
# ---------------------------------------------------------------------------

COUNTER = "counter"
FRIDGE = "fridge"

KNOWN_LOCATIONS = (COUNTER, FRIDGE)

# Fridge slows fermentation to a third of room-temperature speed
SPEED_MULTIPLIERS = {
    COUNTER: 1.0,
    FRIDGE: 1.0 / 3.0,
}

BASELINE_SPEED = 1.0


def speed_multiplier(location: str | None) -> float:
    """Return the fermentation speed for a location tag.

    Unknown or missing tags run at baseline speed.
    """
    if not isinstance(location, str):
        return BASELINE_SPEED
    return SPEED_MULTIPLIERS.get(location, BASELINE_SPEED)


def other_location(location: str | None) -> str:
    """Location offered by the "move" action: fridge from the counter, else counter."""
    return FRIDGE if location == COUNTER else COUNTER
