"""
Daily record normalization.

The upstream meta feed is loose: numbers sometimes arrive as strings, fields go
missing, and a day is identified either by `dia` or only by its ISO date. This
module turns those records into uniform DayTarget rows, one per calendar day.
"""
import calendar
import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional

from metas_pacing.models import DayTarget

logger = logging.getLogger(__name__)

ISO_DATE = re.compile(r'^\s*(\d{4})-(\d{2})-(\d{2})')

DAY_KEYS = ('dia', 'day')
DATE_KEYS = ('data', 'date')
META_KEYS = ('meta_valor', 'meta_value', 'meta')
WEIGHT_KEYS = ('peso_aplicado', 'weight', 'peso')
SALES_KEYS = ('venda_realizada', 'reported_sales', 'venda_total', 'venda_projetada')
SUPER_META_KEYS = ('super_meta_valor', 'super_meta_value')


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def coerce_amount(value: Any) -> float:
    """Coerce a monetary/quantity value to a non-negative float.

    Missing, non-numeric, NaN, infinite and negative values all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def _first(raw: Mapping[str, Any], keys) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _parse_day(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number) or number != int(number):
        return None
    return int(number)


def _day_from_date(value: Any) -> Optional[int]:
    if not isinstance(value, str):
        return None
    match = ISO_DATE.match(value)
    if not match:
        return None
    return int(match.group(3))


def _record_day(raw: Mapping[str, Any]) -> Optional[int]:
    """Calendar day of a record: `dia` when it is a valid day, else the ISO date."""
    for day in (_parse_day(_first(raw, DAY_KEYS)), _day_from_date(_first(raw, DATE_KEYS))):
        if day is not None and 1 <= day <= 31:
            return day
    return None


def normalize_day(raw: Mapping[str, Any]) -> Optional[DayTarget]:
    """Normalize one upstream day record, or return None if it has no usable day."""
    if not isinstance(raw, Mapping):
        logger.warning("Dropping day record that is not an object: %r", raw)
        return None

    day = _record_day(raw)
    if day is None:
        logger.warning("Dropping day record without a usable day: %r", dict(raw))
        return None

    return DayTarget(
        day=day,
        meta_value=coerce_amount(_first(raw, META_KEYS)),
        weight=coerce_amount(_first(raw, WEIGHT_KEYS)),
        reported_sales=coerce_amount(_first(raw, SALES_KEYS)),
        super_meta_value=coerce_amount(_first(raw, SUPER_META_KEYS)),
    )


def normalize_month(raws: Iterable[Mapping[str, Any]], year: int, month: int) -> List[DayTarget]:
    """Normalize a month of records into exactly one DayTarget per calendar day.

    Out-of-range days are dropped, the first record of a repeated day wins and
    missing days are filled with zeros.
    """
    last_day = days_in_month(year, month)
    by_day = {}
    for raw in raws or []:
        target = normalize_day(raw)
        if target is None:
            continue
        if target.day > last_day:
            logger.warning("Dropping day %s outside %04d-%02d", target.day, year, month)
            continue
        if target.day in by_day:
            logger.warning("Duplicate record for day %s in %04d-%02d, keeping the first",
                           target.day, year, month)
            continue
        by_day[target.day] = target

    missing = [d for d in range(1, last_day + 1) if d not in by_day]
    if missing and by_day:
        logger.debug("Filling %d missing days in %04d-%02d: %s", len(missing), year, month, missing)

    return [by_day[d] if d in by_day else DayTarget(day=d) for d in range(1, last_day + 1)]


def apply_sales_history(targets: List[DayTarget], history: Iterable[Mapping[str, Any]]) -> List[DayTarget]:
    """Overlay the closed-day sales history on the meta feed.

    History rows (`{data, dia, venda_total}`) replace `reported_sales` for the
    days they cover; other days keep the meta feed's figure.
    """
    sales_by_day = {}
    for row in history or []:
        if not isinstance(row, Mapping):
            continue
        day = _record_day(row)
        if day is None:
            logger.warning("Dropping sales history row without a usable day: %r", dict(row))
            continue
        sales_by_day[day] = coerce_amount(_first(row, SALES_KEYS))

    return [
        t.model_copy(update={'reported_sales': sales_by_day[t.day]}) if t.day in sales_by_day else t
        for t in targets
    ]
