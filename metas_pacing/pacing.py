"""Month-to-date pacing against the seasonal meta."""
from typing import List

from metas_pacing.models import FusedDay, PacingSnapshot, Status
from metas_pacing.normalizer import coerce_amount
from metas_pacing.status import classify, percent_of


def weighted_elapsed_percent(fused: List[FusedDay]) -> float:
    """Share of the month's seasonality weight already realized.

    Heavier days (weekends, paydays) count proportionally more than a plain
    day count would.
    """
    total = sum(d.weight for d in fused)
    realized = sum(d.weight for d in fused if d.is_realized)
    return percent_of(realized, total)


def compute_pacing(fused: List[FusedDay], today: int, fallback_actual: float = 0.0) -> PacingSnapshot:
    """Build the pacing snapshot for one store/month.

    `fallback_actual` (the live month-to-date figure) is only used when there
    is no day data at all; then meta is zero and the status reflects whatever
    was sold.
    """
    if not fused:
        actual_to_date = coerce_amount(fallback_actual)
        # Sales against a zero meta are never reported as on_track
        return PacingSnapshot(
            actual_to_date=actual_to_date,
            difference=actual_to_date,
            status=Status.AHEAD if actual_to_date > 0 else Status.ON_TRACK,
        )

    meta_to_date = sum(d.meta_value for d in fused if d.day <= today)
    actual_to_date = sum(d.actual_value for d in fused if d.is_realized)
    difference = actual_to_date - meta_to_date
    difference_percent = percent_of(difference, meta_to_date)

    return PacingSnapshot(
        meta_to_date=meta_to_date,
        actual_to_date=actual_to_date,
        difference=difference,
        difference_percent=difference_percent,
        status=classify(difference_percent),
        weighted_elapsed_percent=weighted_elapsed_percent(fused),
    )
