"""
Store ranking: network targets crossed with network sales for one month.

Stores are classified against an unweighted expected pace (day / days in
month), a simpler reference than the weighted figure used for a single store.
"""
import logging
from datetime import date
from typing import Any, Iterable, List, Mapping

from metas_pacing.models import RankingSummary, Status, StoreRankingEntry
from metas_pacing.normalizer import coerce_amount, days_in_month
from metas_pacing.status import classify, percent_of

logger = logging.getLogger(__name__)

UNKNOWN_REGION = 'N/A'


def expected_pace_percent(as_of: date) -> float:
    """Percentage of the current month elapsed, by plain day count."""
    return percent_of(as_of.day, days_in_month(as_of.year, as_of.month))


def _store_code(value: Any) -> str:
    return str(value).strip() if value is not None else ''


def rank_stores(
    targets: Iterable[Mapping[str, Any]],
    sales: Iterable[Mapping[str, Any]],
    as_of: date,
) -> List[StoreRankingEntry]:
    """Rank every store with a target by attainment, best first.

    `targets` rows look like `{loja_codigo, meta}`; `sales` rows like
    `{codigo, loja, regional, venda_total}`. Stores missing from the sales feed
    rank with 0%. Ties keep the order of `targets`.
    """
    sales_by_store = {}
    for row in sales or []:
        if not isinstance(row, Mapping):
            continue
        code = _store_code(row.get('codigo'))
        if code:
            sales_by_store[code] = row

    benchmark = expected_pace_percent(as_of)
    entries = []
    for row in targets or []:
        code = _store_code(row.get('loja_codigo')) if isinstance(row, Mapping) else ''
        if not code:
            logger.warning("Skipping target row without store code: %r", row)
            continue

        target_total = coerce_amount(row.get('meta'))
        sale = sales_by_store.get(code)
        realized = coerce_amount(sale.get('venda_total')) if sale else 0.0
        attainment = percent_of(realized, target_total)

        entries.append(StoreRankingEntry(
            store_code=code,
            store_name=(sale.get('loja') if sale else None) or code,
            region=(sale.get('regional') if sale else None) or UNKNOWN_REGION,
            target_total=target_total,
            realized_total=realized,
            attainment_percent=attainment,
            status=classify(attainment, benchmark),
        ))

    # sorted() is stable with reverse=True
    return sorted(entries, key=lambda e: e.attainment_percent, reverse=True)


def summarize_ranking(entries: Iterable[StoreRankingEntry]) -> RankingSummary:
    summary = RankingSummary()
    for entry in entries:
        summary.target_total += entry.target_total
        summary.realized_total += entry.realized_total
        if entry.status is Status.AHEAD:
            summary.stores_ahead += 1
        elif entry.status is Status.BEHIND:
            summary.stores_behind += 1
        else:
            summary.stores_on_track += 1
    summary.attainment_percent = percent_of(summary.realized_total, summary.target_total)
    return summary
