"""
Data fusion: pick the authoritative sales figure for every day of the month.

    day <  today  -> historical (closed-day figure from the feed)
    day == today  -> realtime   (live figure, never the feed's projection)
    day >  today  -> projected  (statistical figure from the feed)

`today` is the real day-of-month on the stores' clock, even when another
month is being browsed, so pacing always reads "as of now". A past month
(today beyond its last day) comes out fully historical.
"""
from typing import Iterable, List

from metas_pacing.models import CumulativePoint, DayTarget, FusedDay, LiveSales, SourceKind


def source_for(day: int, today: int) -> SourceKind:
    if day < today:
        return SourceKind.HISTORICAL
    if day == today:
        return SourceKind.REALTIME
    return SourceKind.PROJECTED


def fuse_day(target: DayTarget, live: LiveSales, today: int) -> FusedDay:
    kind = source_for(target.day, today)
    if kind is SourceKind.REALTIME:
        actual = live.today_total
    else:
        actual = target.reported_sales

    return FusedDay(
        day=target.day,
        meta_value=target.meta_value,
        weight=target.weight,
        actual_value=actual,
        projected_value=target.reported_sales,
        delta=actual - target.meta_value,
        source_kind=kind,
        is_realized=target.day <= today,
    )


def fuse_days(targets: Iterable[DayTarget], live: LiveSales, today: int) -> List[FusedDay]:
    """Fuse a month of targets with the live figures, preserving day order."""
    return [fuse_day(t, live, today) for t in targets]


def cumulative_series(fused: Iterable[FusedDay]) -> List[CumulativePoint]:
    """Accumulated meta for every day and accumulated actual up to today."""
    points = []
    meta_total = 0.0
    actual_total = 0.0
    for day in fused:
        meta_total += day.meta_value
        actual = None
        if day.is_realized:
            actual_total += day.actual_value
            actual = actual_total
        points.append(CumulativePoint(day=day.day, meta_cumulative=meta_total, actual_cumulative=actual))
    return points
