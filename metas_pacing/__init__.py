"""
Metas pacing engine.
Fuses closed-day, live and projected sales into a per-day timeline and derives
pacing, today-vs-target and store ranking figures from it.
"""
from metas_pacing.fusion import cumulative_series, fuse_days
from metas_pacing.models import (
    CumulativePoint,
    DayTarget,
    FusedDay,
    LiveSales,
    PacingSnapshot,
    RankingSummary,
    SalesSummary,
    SourceKind,
    Status,
    StoreRankingEntry,
    StoreSales,
    StoreSyncStatus,
    SyncState,
    TodayPerformance,
)
from metas_pacing.normalizer import (
    apply_sales_history,
    coerce_amount,
    days_in_month,
    normalize_day,
    normalize_month,
)
from metas_pacing.pacing import compute_pacing, weighted_elapsed_percent
from metas_pacing.ranking import expected_pace_percent, rank_stores, summarize_ranking
from metas_pacing.sales import build_sales_list, summarize_sales
from metas_pacing.today import compare_today, find_today

__version__ = "1.0.0"
