"""Plain data records passed in and out of the engine."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Status(str, Enum):
    AHEAD = "ahead"
    ON_TRACK = "on_track"
    BEHIND = "behind"


class SourceKind(str, Enum):
    HISTORICAL = "historical"
    REALTIME = "realtime"
    PROJECTED = "projected"


class SyncState(str, Enum):
    ONLINE = "online"
    WARNING = "warning"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


# ============================================================================
# Inputs
# ============================================================================

class DayTarget(BaseModel):
    day: int = Field(ge=1, le=31)
    meta_value: float = 0
    weight: float = 0
    reported_sales: float = 0  # closed-day figure, or the projection for days not yet closed
    super_meta_value: float = 0


class LiveSales(BaseModel):
    """Both live figures. They answer different questions and travel together."""
    today_total: float = 0
    month_to_date_total: float = 0


# ============================================================================
# Derived
# ============================================================================

class FusedDay(BaseModel):
    day: int
    meta_value: float
    weight: float
    actual_value: float
    projected_value: float
    delta: float
    source_kind: SourceKind
    is_realized: bool


class CumulativePoint(BaseModel):
    day: int
    meta_cumulative: float
    actual_cumulative: Optional[float] = None


class PacingSnapshot(BaseModel):
    meta_to_date: float = 0
    actual_to_date: float = 0
    difference: float = 0
    difference_percent: float = 0
    status: Status = Status.ON_TRACK
    weighted_elapsed_percent: float = 0


class TodayPerformance(BaseModel):
    meta_today: float = 0
    actual_today: float = 0
    projected_today: float = 0
    delta_vs_meta: float = 0
    percent_vs_meta: float = 0
    delta_vs_projection: float = 0
    percent_vs_projection: float = 0
    status: Status = Status.ON_TRACK


class StoreRankingEntry(BaseModel):
    store_code: str
    store_name: str
    region: str
    target_total: float
    realized_total: float
    attainment_percent: float
    status: Status


class RankingSummary(BaseModel):
    target_total: float = 0
    realized_total: float = 0
    attainment_percent: float = 0
    stores_ahead: int = 0
    stores_on_track: int = 0
    stores_behind: int = 0


class StoreSales(BaseModel):
    store_code: str
    store_name: str
    region: str
    sales_total: float = 0
    quantity: float = 0
    sales_count: float = 0
    average_ticket: float = 0


class SalesSummary(BaseModel):
    stores: int = 0
    sales_total: float = 0
    quantity: float = 0
    average_ticket: float = 0


class StoreSyncStatus(BaseModel):
    store_code: str
    store_name: str
    region: str
    last_sent: Optional[str] = None
    minutes_ago: Optional[int] = None
    status: SyncState
