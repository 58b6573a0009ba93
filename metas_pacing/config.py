"""
Service configuration.
Everything comes from environment variables; defaults suit local development.
"""
import os
from datetime import date, datetime, timedelta, timezone
from typing import FrozenSet, Optional

# Upstream sales API
API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:8080').rstrip('/')
API_SECRET_KEY = os.getenv('API_SECRET_KEY', '')
UPSTREAM_TIMEOUT = float(os.getenv('UPSTREAM_TIMEOUT', 30))

# Stores report in local time (BRT = UTC-3)
SALES_TZ_OFFSET_HOURS = int(os.getenv('SALES_TZ_OFFSET_HOURS', -3))
SALES_TZ = timezone(timedelta(hours=SALES_TZ_OFFSET_HOURS))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]


def parse_user_ids(raw: Optional[str]) -> FrozenSet[int]:
    """Parse a comma-separated list of user IDs, ignoring blanks and junk."""
    ids = set()
    for part in (raw or '').split(','):
        part = part.strip()
        if part.isdigit():
            ids.add(int(part))
    return frozenset(ids)


# Users allowed to see the metas views
METAS_ALLOWED_USER_IDS = parse_user_ids(os.getenv('METAS_ALLOWED_USER_IDS'))


def local_today(now: Optional[datetime] = None) -> date:
    """Current date on the stores' clock.

    This is the single point where pacing touches the wall clock. Every engine
    function takes the resulting day explicitly.
    """
    if now is None:
        now = datetime.now(SALES_TZ)
    elif now.tzinfo is not None:
        now = now.astimezone(SALES_TZ)
    return now.date()
