"""FastAPI application: insider trades API, provider proxies and dashboard."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.requests import Request

from insider_tracker.collectors.base_collector import ProviderError, close_shared_client
from insider_tracker.config import settings
from insider_tracker.engine.dashboard_view import render_detail, render_table
from insider_tracker.models.analysis import DetailView, TableRow
from insider_tracker.services.query_service import QueryService
from insider_tracker.services.refresh_service import TransactionRefresher
from insider_tracker.services.scheduler import RefreshScheduler
from insider_tracker.services.transaction_store import TransactionStore
from insider_tracker.utils.logger import logger

app = FastAPI(
    title="Insider Tracker",
    description="Live insider trades with on-demand price and financial ratio analysis",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Static files + Templates
app.mount("/static", StaticFiles(directory=str(settings.STATIC_DIR)), name="static")
templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))


# ── Singleton services ──────────────────────────────────────────────
store = TransactionStore()
query = QueryService(store)
refresher = TransactionRefresher(store)
scheduler = RefreshScheduler(refresher)

PRICE_ERROR = "Error fetching stock price data"
FINANCIALS_ERROR = "Error fetching financial data."
NO_FINANCIALS = "No financial data available."


def _no_price_data(symbol: str) -> PlainTextResponse:
    return PlainTextResponse(
        f"No stock price data available for symbol: {symbol}", status_code=404,
    )


def _provider_failure(e: ProviderError, message: str) -> PlainTextResponse:
    """Plain-text error carrying the provider's status, 500 when it had none."""
    return PlainTextResponse(message, status_code=e.status_code or 500)


# ══════════════════════════════════════════════════════════════════════
# LIFECYCLE
# ══════════════════════════════════════════════════════════════════════


@app.on_event("startup")
async def _start_refresh() -> None:
    """Start the transaction refresh (first run fires immediately)."""
    missing = settings.missing_keys()
    if missing:
        logger.warning("[Boot] Missing API keys: %s", ", ".join(missing))
    result = scheduler.start()
    logger.info("[Boot] Refresh scheduler: %s", result)


@app.on_event("shutdown")
async def _shutdown() -> None:
    scheduler.stop()
    await close_shared_client()


# ══════════════════════════════════════════════════════════════════════
# FRONTEND
# ══════════════════════════════════════════════════════════════════════


@app.get("/", response_class=HTMLResponse)
async def root(request: Request) -> HTMLResponse:
    """Serve the dashboard page."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"refresh_seconds": settings.REFRESH_INTERVAL_SECONDS},
    )


# ══════════════════════════════════════════════════════════════════════
# DATA API
# ══════════════════════════════════════════════════════════════════════


@app.get("/api/health")
async def health() -> dict:
    return {
        "api": "ok",
        "scheduler_running": scheduler.is_running,
        "store": store.stats(),
        "missing_keys": settings.missing_keys(),
    }


@app.get("/api/insider-trades")
async def insider_trades() -> list[dict[str, Any]]:
    """Current snapshot of US-equity insider transactions."""
    return [tx.model_dump(by_alias=True) for tx in query.get_transactions()]


@app.get("/api/tiingo", response_model=None)
async def tiingo_prices(
    symbol: str = Query(..., min_length=1),
) -> list[dict[str, Any]] | PlainTextResponse:
    """Daily price records for ``symbol``, straight from Tiingo."""
    try:
        series = await query.get_price_series(symbol)
    except ProviderError as e:
        logger.error(
            "[Tiingo] Error fetching stock price data for %s: %s", symbol, e.message,
        )
        return _provider_failure(e, PRICE_ERROR)

    if series is None:
        return _no_price_data(symbol)
    return series.records


@app.get("/api/polygon-financials", response_model=None)
async def polygon_financials(
    symbol: str = Query(..., min_length=1),
) -> dict[str, Any] | PlainTextResponse:
    """Most recent financials result for ``symbol``, straight from Polygon."""
    try:
        result = await query.get_financials(symbol)
    except ProviderError as e:
        logger.error(
            "[Polygon] Error fetching financial data for %s: %s", symbol, e.message,
        )
        return PlainTextResponse(FINANCIALS_ERROR, status_code=500)

    if result is None:
        return PlainTextResponse(NO_FINANCIALS, status_code=404)
    return result


# ══════════════════════════════════════════════════════════════════════
# DASHBOARD VIEWS
# ══════════════════════════════════════════════════════════════════════


@app.get("/api/dashboard/table")
async def dashboard_table() -> list[TableRow]:
    """Rendered table rows for the current snapshot."""
    return render_table(query.get_transactions())


@app.get("/api/dashboard/detail", response_model=None)
async def dashboard_detail(
    symbol: str = Query(..., min_length=1),
) -> DetailView | PlainTextResponse:
    """Price, then financials, then ratio analysis for one symbol.

    No price data means no detail view (404). Financials failures only
    downgrade the view to HOLD without metrics.
    """
    try:
        series = await query.get_price_series(symbol)
    except ProviderError as e:
        logger.error(
            "[Dashboard] Price fetch failed for %s: %s", symbol, e.message,
        )
        return _provider_failure(e, PRICE_ERROR)

    if series is None:
        return _no_price_data(symbol)

    try:
        financials = await query.get_financials(symbol)
    except ProviderError as e:
        logger.error(
            "[Dashboard] Financials fetch failed for %s: %s", symbol, e.message,
        )
        financials = None

    view = render_detail(symbol, series, financials)
    if view is None:
        return _no_price_data(symbol)
    return view


# ══════════════════════════════════════════════════════════════════════
# REFRESH CONTROL
# ══════════════════════════════════════════════════════════════════════


@app.get("/api/refresh/status")
async def refresh_status() -> dict:
    return scheduler.get_status()


@app.post("/api/refresh/run")
async def refresh_run() -> dict:
    """Refresh the transaction snapshot now, outside the schedule."""
    return await scheduler.run_now()


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
