"""
Metas Pacing API
FastAPI service that fetches the upstream sales feeds and serves store pacing,
today-vs-target and network ranking computed by the metas_pacing engine.
"""
from fastapi import FastAPI, Query, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from starlette.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Optional, Tuple
import io
import logging

from openpyxl import Workbook

from metas_pacing import config
from metas_pacing.fusion import cumulative_series, fuse_days
from metas_pacing.models import LiveSales
from metas_pacing.normalizer import apply_sales_history, coerce_amount, days_in_month, normalize_month
from metas_pacing.pacing import compute_pacing
from metas_pacing.ranking import expected_pace_percent, rank_stores, summarize_ranking
from metas_pacing.sales import build_sales_list, summarize_sales
from metas_pacing.sync_status import build_sync_report, count_sync_statuses
from metas_pacing.today import compare_today, find_today
from metas_pacing.upstream import UpstreamClient, UpstreamError, rows, store_sales_total

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("metas_api")

# Shared upstream client (one HTTP session for the process)
upstream: Optional[UpstreamClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global upstream
    upstream = UpstreamClient()
    logger.info("Upstream sales API: %s", upstream.base_url)
    yield
    upstream.session.close()
    upstream = None


app = FastAPI(
    title="Metas Pacing API",
    description="Store pacing, daily performance and ranking against sales targets",
    version="1.0.0",
    lifespan=lifespan
)

# CORS for the dashboard front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# GZip compression for responses
app.add_middleware(GZipMiddleware, minimum_size=500)


# ============================================================================
# Helper Functions
# ============================================================================

def get_upstream() -> UpstreamClient:
    global upstream
    if upstream is None:
        upstream = UpstreamClient()
    return upstream


def require_metas_access(user_id: int = Query(..., description="Portal user ID")) -> int:
    """Only users listed in METAS_ALLOWED_USER_IDS may see the metas views."""
    if user_id not in config.METAS_ALLOWED_USER_IDS:
        raise HTTPException(status_code=403, detail="Permission denied. Metas view not enabled for this user.")
    return user_id


def parse_month(month: Optional[str], today: date) -> Tuple[int, int]:
    """Return (year, month) from YYYY-MM, defaulting to the current month."""
    if not month:
        return today.year, today.month
    try:
        period = datetime.strptime(month, "%Y-%m")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid month format. Use YYYY-MM")
    return period.year, period.month


def upstream_failure(e: UpstreamError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(e))


# ============================================================================
# Health
# ============================================================================

@app.get("/health")
def health(client: UpstreamClient = Depends(get_upstream)):
    try:
        client.fetch_sync_status()
        return {"status": "healthy", "upstream": "connected", "host": client.base_url}
    except UpstreamError as e:
        return {"status": "unhealthy", "error": str(e), "host": client.base_url}


# ============================================================================
# Metas Endpoints
# ============================================================================

@app.get("/api/v1/metas/pacing")
def get_store_pacing(
    store_codigo: str = Query(..., description="Store code"),
    month: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    user_id: int = Depends(require_metas_access),
    client: UpstreamClient = Depends(get_upstream)
):
    """Day-by-day fusion, month pacing and today's performance for one store.

    Days are always placed relative to the real current day, even when another
    month is requested, so pacing reads "as of now".
    """
    today = config.local_today()
    year, mon = parse_month(month, today)
    store_codigo = store_codigo.strip()

    # The meta feed carries no closed-day sales, so the history feed is required
    try:
        distribuida = client.fetch_metas_distribuida(store_codigo, year, mon)
        history = rows(client.fetch_vendas_diarias(store_codigo, year, mon), 'dias')
        vendas_today = client.fetch_vendas(data=today.isoformat())
        vendas_mtd = client.fetch_vendas(
            data_inicio=today.replace(day=1).isoformat(),
            data_fim=today.isoformat()
        )
    except UpstreamError as e:
        raise upstream_failure(e)

    dias = rows(distribuida, 'dias')
    targets = apply_sales_history(normalize_month(dias, year, mon), history) if dias else []

    live = LiveSales(
        today_total=coerce_amount(store_sales_total(vendas_today, store_codigo)),
        month_to_date_total=coerce_amount(store_sales_total(vendas_mtd, store_codigo)),
    )
    fused = fuse_days(targets, live, today.day)
    pacing = compute_pacing(fused, today.day, fallback_actual=live.month_to_date_total)
    today_performance = compare_today(find_today(fused, today.day), live.today_total)

    return {
        "success": True,
        "data": {
            "store_codigo": store_codigo,
            "period": f"{year:04d}-{mon:02d}",
            "today": today.isoformat(),
            "total_meta_mes": coerce_amount(distribuida.get('total_meta_mes')),
            "sazonalidade_usada": distribuida.get('sazonalidade_usada'),
            "live": live.model_dump(),
            "pacing": pacing.model_dump(mode="json"),
            "today_performance": today_performance.model_dump(mode="json"),
            "days": [d.model_dump(mode="json") for d in fused],
            "cumulative": [p.model_dump() for p in cumulative_series(fused)],
        }
    }


def build_ranking(client: UpstreamClient, month: Optional[str]):
    today = config.local_today()
    year, mon = parse_month(month, today)
    try:
        metas = client.fetch_metas_regional(year, mon)
        vendas = client.fetch_vendas(
            data_inicio=date(year, mon, 1).isoformat(),
            data_fim=date(year, mon, days_in_month(year, mon)).isoformat()
        )
    except UpstreamError as e:
        raise upstream_failure(e)

    entries = rank_stores(rows(metas, 'metas'), rows(vendas, 'vendas'), today)
    return f"{year:04d}-{mon:02d}", today, entries


@app.get("/api/v1/metas/ranking")
def get_store_ranking(
    month: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    user_id: int = Depends(require_metas_access),
    client: UpstreamClient = Depends(get_upstream)
):
    """Network-wide store ranking by target attainment."""
    period, today, entries = build_ranking(client, month)
    summary = summarize_ranking(entries)

    return {
        "success": True,
        "data": {
            "period": period,
            "expected_pace_percent": round(expected_pace_percent(today), 2),
            "summary": summary.model_dump(),
            "rankings": [
                {"rank": idx + 1, **entry.model_dump(mode="json")}
                for idx, entry in enumerate(entries)
            ]
        }
    }


@app.get("/api/v1/metas/ranking/export")
def export_store_ranking(
    month: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    user_id: int = Depends(require_metas_access),
    client: UpstreamClient = Depends(get_upstream)
):
    """Download the store ranking as an Excel sheet."""
    period, today, entries = build_ranking(client, month)

    wb = Workbook()
    ws = wb.active
    ws.title = "Ranking"

    headers = [
        "rank", "store_code", "store_name", "region",
        "target_total", "realized_total", "attainment_percent", "status"
    ]
    for col, header in enumerate(headers, 1):
        ws.cell(row=1, column=col, value=header)

    for row, entry in enumerate(entries, 2):
        values = [
            row - 1, entry.store_code, entry.store_name, entry.region,
            round(entry.target_total, 2), round(entry.realized_total, 2),
            round(entry.attainment_percent, 1), entry.status.value
        ]
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=value)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)

    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=ranking_{period}.xlsx"}
    )


# ============================================================================
# Sales
# ============================================================================

@app.get("/api/v1/vendas")
def get_sales(
    date_: Optional[str] = Query(None, alias="date", description="Day in YYYY-MM-DD format"),
    month: Optional[str] = Query(None, description="Month in YYYY-MM format"),
    client: UpstreamClient = Depends(get_upstream)
):
    """Per-store sales for one day or one month, highest first, with network totals.

    Without parameters it answers for the current day.
    """
    if date_ and month:
        raise HTTPException(status_code=400, detail="Use either date or month, not both")

    today = config.local_today()
    if month:
        year, mon = parse_month(month, today)
        start, end = date(year, mon, 1), date(year, mon, days_in_month(year, mon))
    else:
        if date_:
            try:
                start = end = datetime.strptime(date_, "%Y-%m-%d").date()
            except ValueError:
                raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
        else:
            start = end = today

    try:
        if start == end:
            response = client.fetch_vendas(data=start.isoformat())
        else:
            response = client.fetch_vendas(data_inicio=start.isoformat(), data_fim=end.isoformat())
    except UpstreamError as e:
        raise upstream_failure(e)

    entries = build_sales_list(rows(response, 'vendas'))
    return {
        "success": True,
        "data": {
            "periodo_inicio": start.isoformat(),
            "periodo_fim": end.isoformat(),
            "data_consulta": response.get('data_consulta'),
            "fonte": response.get('fonte'),
            "summary": summarize_sales(entries).model_dump(),
            "vendas": [e.model_dump() for e in entries]
        }
    }


# ============================================================================
# Sync Monitor
# ============================================================================

@app.get("/api/v1/sync-status")
def get_sync_status(client: UpstreamClient = Depends(get_upstream)):
    """Last-send lag per store, most lagged first."""
    try:
        response = client.fetch_sync_status()
    except UpstreamError as e:
        raise upstream_failure(e)

    report = build_sync_report(rows(response, 'lojas'))
    return {
        "success": True,
        "data": {
            "data_consulta": response.get('data_consulta'),
            "counts": count_sync_statuses(report),
            "lojas": [s.model_dump(mode="json") for s in report]
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
