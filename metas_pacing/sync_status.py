"""
Store sync monitor.

The upstream reports how long ago each store last sent data, either as
"00d 01h 05m 27s" or as "HH:MM:SS". Lag under an hour is online, under a day
is a warning, anything older is offline.
"""
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from metas_pacing.models import StoreSyncStatus, SyncState

ONLINE_MINUTES = 60
WARNING_MINUTES = 24 * 60

_UNIT_PATTERNS = {
    'days': re.compile(r'(\d+)d'),
    'hours': re.compile(r'(\d+)h'),
    'minutes': re.compile(r'(\d+)m'),
}


def parse_lag_minutes(text: Optional[str]) -> Optional[int]:
    """Whole minutes since the last send, or None if the value is unreadable."""
    if not text or not isinstance(text, str):
        return None

    found = {unit: p.search(text) for unit, p in _UNIT_PATTERNS.items()}
    if any(found.values()):
        days, hours, minutes = (int(m.group(1)) if m else 0
                                for m in (found['days'], found['hours'], found['minutes']))
        return days * 24 * 60 + hours * 60 + minutes

    parts = text.strip().split(':')
    if len(parts) == 3 and all(p.strip().isdigit() for p in parts[:2]):
        return int(parts[0]) * 60 + int(parts[1])
    return None


def classify_sync(minutes: Optional[int]) -> SyncState:
    if minutes is None:
        return SyncState.UNKNOWN
    if minutes < ONLINE_MINUTES:
        return SyncState.ONLINE
    if minutes < WARNING_MINUTES:
        return SyncState.WARNING
    return SyncState.OFFLINE


def build_sync_report(stores: Iterable[Mapping[str, Any]]) -> List[StoreSyncStatus]:
    """Classify every store and sort the most lagged first (unknown lag on top)."""
    report = []
    for row in stores or []:
        if not isinstance(row, Mapping):
            continue
        last_sent = row.get('tempo_ultimo_envio')
        minutes = parse_lag_minutes(last_sent)
        report.append(StoreSyncStatus(
            store_code=str(row.get('codigo') or ''),
            store_name=str(row.get('loja') or ''),
            region=str(row.get('regional') or ''),
            last_sent=last_sent,
            minutes_ago=minutes,
            status=classify_sync(minutes),
        ))
    return sorted(report, key=lambda s: float('inf') if s.minutes_ago is None else s.minutes_ago,
                  reverse=True)


def count_sync_statuses(report: Iterable[StoreSyncStatus]) -> Dict[str, int]:
    """Count stores per state; unknown counts as offline."""
    counts = {SyncState.ONLINE.value: 0, SyncState.WARNING.value: 0, SyncState.OFFLINE.value: 0}
    for entry in report:
        state = SyncState.OFFLINE if entry.status is SyncState.UNKNOWN else entry.status
        counts[state.value] += 1
    return counts
