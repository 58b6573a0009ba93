"""Shared ratio and ahead/on-track/behind rules."""
from metas_pacing.models import Status

# Half-width of the on_track band, in percentage points
DEAD_ZONE = 5.0


def percent_of(part: float, whole: float) -> float:
    """part / whole * 100, defined as 0 when whole is 0."""
    if not whole:
        return 0.0
    return (part / whole) * 100


def classify(percent: float, benchmark: float = 0.0) -> Status:
    """Place a percentage against a benchmark with a ±DEAD_ZONE band.

    The upper edge counts as ahead, the lower edge as on_track.
    """
    if percent >= benchmark + DEAD_ZONE:
        return Status.AHEAD
    if percent < benchmark - DEAD_ZONE:
        return Status.BEHIND
    return Status.ON_TRACK
