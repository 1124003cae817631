"""
Helium Site Monitor - API Server

Provides endpoints for:
- Fleet dashboard (activity, latest readings, threshold alerts)
- Site listing and search
- Per-site time series
- Server-rendered charts

Every response is computed from the database on request (Cache-Control: no-store).
"""

import logging

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.database import get_db, get_session_maker
from app.schemas import (
    DashboardResponse,
    MessageResponse,
    SiteDetailResponse,
    SiteRef,
    SiteSearchHit,
)
from app.services.charts import generate_activity_chart, generate_site_chart
from app.services.dashboard import build_dashboard, fetch_ctrl_ranges, fetch_sites
from app.services.lookup import search_sites, site_slug
from app.services.site_detail import clamp_take, get_site_detail

SERVICE_VERSION = "1.0.0"

NO_STORE = {"Cache-Control": "no-store"}

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def not_found() -> JSONResponse:
    return JSONResponse({"message": "Not Found"}, status_code=404, headers=NO_STORE)


# ==================== APP ====================

app = FastAPI(
    title="Helium Site Monitor API",
    description="Read-only monitoring API for remote helium storage sites",
    version=SERVICE_VERSION,
)


@app.middleware("http")
async def no_store(request: Request, call_next):
    """Nothing here may be cached by browsers or proxies."""
    response = await call_next(request)
    response.headers["Cache-Control"] = "no-store"
    return response


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"❌ Database error on {request.method} {request.url.path}")
    return JSONResponse(
        {"message": "Internal Server Error"},
        status_code=500,
        headers=NO_STORE,
    )


# ==================== DASHBOARD ====================

@app.get("/api/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
):
    """
    Per-site activity and latest He readings.
    Rows are ordered by last reading, newest first.
    """
    return await build_dashboard(session_maker)


@app.get("/api/dashboard/chart.png")
async def get_dashboard_chart(
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
):
    """Bar chart of 24h record counts per site."""
    dashboard = await build_dashboard(session_maker)
    return StreamingResponse(generate_activity_chart(dashboard.rows), media_type="image/png")


# ==================== SITES ====================

@app.get("/api/sites", response_model=list[SiteRef])
async def list_sites(
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
):
    """All known sites, ordered by stored key."""
    sites = await fetch_sites(session_maker)
    return [SiteRef(site_db=s.site, name=s.name) for s in sites]


@app.get("/api/search", response_model=list[SiteSearchHit])
async def search(
    q: str = Query("", description="Slug, stored key or name fragment"),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
):
    """Sites ranked by how well they match q."""
    sites = await fetch_sites(session_maker)
    return [
        SiteSearchHit(site_db=s.site, site_slug=site_slug(s.site), name=s.name)
        for s in search_sites(sites, q)
    ]


@app.get(
    "/api/sites/{slug}",
    response_model=SiteDetailResponse,
    responses={404: {"model": MessageResponse}},
)
async def get_site(
    slug: str,
    take: str | None = Query(None, description="Number of readings"),
    session: AsyncSession = Depends(get_db),
):
    """Most recent readings of one site, newest first."""
    lower, upper, default = settings.detail_take_bounds
    detail = await get_site_detail(session, slug, clamp_take(take, lower, upper, default))
    if detail is None:
        return not_found()
    return detail


@app.get("/api/sites/{slug}/chart.png", responses={404: {"model": MessageResponse}})
async def get_site_chart(
    slug: str,
    take: str | None = Query(None, description="Number of readings"),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
):
    """He pressure/level chart with the site's alert limits."""
    lower, upper, default = settings.chart_take_bounds
    async with session_maker() as session:
        detail = await get_site_detail(session, slug, clamp_take(take, lower, upper, default))
    if detail is None:
        return not_found()

    ctrl = await fetch_ctrl_ranges(session_maker)
    limits = ctrl.get(detail.site.site_db) or ctrl.get(settings.default_ctrl_site)

    label = f"Site {slug}"
    if detail.site.name:
        label = f"{label} - {detail.site.name}"

    return StreamingResponse(
        generate_site_chart(detail.rows, label, limits, settings.tz),
        media_type="image/png",
    )


# ==================== HEALTH CHECK ====================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": SERVICE_VERSION,
    }


@app.get("/")
async def root():
    """Root endpoint with endpoint index."""
    return {
        "service": "Helium Site Monitor API",
        "version": SERVICE_VERSION,
        "endpoints": {
            "dashboard": "/api/dashboard",
            "dashboard_chart": "/api/dashboard/chart.png",
            "sites": "/api/sites",
            "search": "/api/search?q=",
            "site": "/api/sites/{slug}?take=",
            "site_chart": "/api/sites/{slug}/chart.png?take=",
            "health": "/health",
        }
    }


# ==================== MAIN ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
