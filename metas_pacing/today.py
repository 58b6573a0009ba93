"""
Today vs target.

A store can trail the month and still beat today's meta; this signal is kept
apart from the month-to-date verdict on purpose.
"""
from typing import Iterable, Optional

from metas_pacing.models import FusedDay, TodayPerformance
from metas_pacing.normalizer import coerce_amount
from metas_pacing.status import classify, percent_of


def find_today(fused: Iterable[FusedDay], today: int) -> Optional[FusedDay]:
    for day in fused:
        if day.day == today:
            return day
    return None


def compare_today(day: Optional[FusedDay], live_today: float) -> TodayPerformance:
    """Compare the live single-day figure with today's meta and projection.

    `live_today` must be the "sales so far today" figure, not month-to-date.
    Without a day record (today falls outside the month) meta and projection
    are zero.
    """
    actual = coerce_amount(live_today)
    meta = day.meta_value if day else 0.0
    projected = day.projected_value if day else 0.0

    delta_vs_meta = actual - meta
    percent_vs_meta = percent_of(delta_vs_meta, meta)
    delta_vs_projection = actual - projected

    return TodayPerformance(
        meta_today=meta,
        actual_today=actual,
        projected_today=projected,
        delta_vs_meta=delta_vs_meta,
        percent_vs_meta=percent_vs_meta,
        delta_vs_projection=delta_vs_projection,
        percent_vs_projection=percent_of(delta_vs_projection, projected),
        status=classify(percent_vs_meta),
    )
