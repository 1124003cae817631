"""
Dashboard Service - per-site activity and alert aggregation

For every site: last reading time, lag, 1h/24h record counts, the latest
He pressure/level and whether they break the site's ctrl range (falling back
to the fleet default range). Recomputed on every request.
"""

import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.database import as_utc
from app.models.ctrl import CtrlRange
from app.models.reading import Reading
from app.models.site import Site
from app.schemas import (
    DashboardMeta,
    DashboardResponse,
    DashboardRow,
    DashboardStats,
    SiteStatus,
    ThresholdRange,
)
from app.services.lookup import site_slug
from app.services.parsing import is_out_of_range, parse_number_loose

logger = logging.getLogger(__name__)

WINDOW_1H = timedelta(hours=1)
WINDOW_24H = timedelta(hours=24)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SessionMaker = async_sessionmaker[AsyncSession]


def to_ms(value: datetime) -> int:
    """Epoch milliseconds, exact."""
    return (value - _EPOCH) // timedelta(milliseconds=1)


def _valid_readings():
    """Rows without a site or a timestamp never count."""
    return (Reading.siteid.is_not(None), Reading.date.is_not(None))


# ==================== QUERIES ====================

async def fetch_sites(session_maker: SessionMaker) -> list[Site]:
    """All sites ordered by stored key."""
    async with session_maker() as session:
        result = await session.execute(select(Site).order_by(Site.site))
        return list(result.scalars().all())


async def _last_seen_by_site(session_maker: SessionMaker) -> dict[str, datetime]:
    stmt = (
        select(Reading.siteid, func.max(Reading.date))
        .where(*_valid_readings())
        .group_by(Reading.siteid)
    )
    async with session_maker() as session:
        result = await session.execute(stmt)
        return {siteid: as_utc(last) for siteid, last in result.all() if last is not None}


async def _count_since(session_maker: SessionMaker, since: datetime) -> dict[str, int]:
    stmt = (
        select(Reading.siteid, func.count())
        .where(*_valid_readings(), Reading.date >= since)
        .group_by(Reading.siteid)
    )
    async with session_maker() as session:
        result = await session.execute(stmt)
        return {siteid: count for siteid, count in result.all()}


async def _latest_values_by_site(
    session_maker: SessionMaker,
) -> dict[str, tuple[Optional[float], Optional[float]]]:
    """
    He pressure/level of the newest reading per site.

    ROW_NUMBER over (date desc, index desc) picks exactly one row per site;
    equal timestamps resolve to the higher index.
    """
    rank = (
        func.row_number()
        .over(
            partition_by=Reading.siteid,
            order_by=(Reading.date.desc(), Reading.index.desc()),
        )
        .label("rank")
    )
    ranked = (
        select(Reading.siteid, Reading.hepres, Reading.heleve, rank)
        .where(*_valid_readings())
        .subquery()
    )
    stmt = select(ranked.c.siteid, ranked.c.hepres, ranked.c.heleve).where(ranked.c.rank == 1)

    async with session_maker() as session:
        result = await session.execute(stmt)
        return {
            siteid: (parse_number_loose(hepres), parse_number_loose(heleve))
            for siteid, hepres, heleve in result.all()
        }


async def fetch_ctrl_ranges(session_maker: SessionMaker) -> dict[str, ThresholdRange]:
    """All ctrl rows, bounds parsed loosely."""
    async with session_maker() as session:
        result = await session.execute(select(CtrlRange))
        return {
            row.site: ThresholdRange(
                mrplel=parse_number_loose(row.mrplel),
                mrpleh=parse_number_loose(row.mrpleh),
                mrlevl=parse_number_loose(row.mrlevl),
                mrlevh=parse_number_loose(row.mrlevh),
            )
            for row in result.scalars().all()
        }


# ==================== ASSEMBLY ====================

def classify(last_at: Optional[datetime], since_1h: datetime, since_24h: datetime) -> SiteStatus:
    if last_at is not None and last_at >= since_1h:
        return SiteStatus.ok
    if last_at is not None and last_at >= since_24h:
        return SiteStatus.warn
    return SiteStatus.stale


def lag_minutes(now: datetime, last_at: Optional[datetime]) -> Optional[int]:
    """Whole minutes since last_at, never negative."""
    if last_at is None:
        return None
    return max(0, (now - last_at) // timedelta(minutes=1))


def sort_by_last_at(rows: list[DashboardRow]) -> list[DashboardRow]:
    """Newest activity first; sites that never reported go last."""
    return sorted(
        rows,
        key=lambda r: to_ms(r.last_at) if r.last_at else 0,
        reverse=True,
    )


def summarize(rows: list[DashboardRow], since_1h: datetime, since_24h: datetime) -> DashboardStats:
    total = len(rows)
    active_1h = sum(1 for r in rows if r.last_at is not None and r.last_at >= since_1h)
    active_24h = sum(1 for r in rows if r.last_at is not None and r.last_at >= since_24h)
    return DashboardStats(
        total_sites=total,
        active_1h=active_1h,
        stale_24h=total - active_24h,
        total_24h_records=sum(r.count_24h for r in rows),
    )


async def build_dashboard(
    session_maker: SessionMaker,
    now: Optional[datetime] = None,
) -> DashboardResponse:
    """
    Build the full dashboard payload.

    All store queries run concurrently, each in its own session, and are
    joined once every one of them has finished. A failing query fails the
    whole call.
    """
    started = time.perf_counter()
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    since_1h = now - WINDOW_1H
    since_24h = now - WINDOW_24H

    sites, last_seen, count_1h, count_24h, latest, ctrl = await asyncio.gather(
        fetch_sites(session_maker),
        _last_seen_by_site(session_maker),
        _count_since(session_maker, since_1h),
        _count_since(session_maker, since_24h),
        _latest_values_by_site(session_maker),
        fetch_ctrl_ranges(session_maker),
    )

    ctrl_default = ctrl.get(settings.default_ctrl_site)
    no_limits = ThresholdRange()

    rows = []
    for site in sites:
        key = site.site
        last_at = last_seen.get(key)
        he_psi, he_pct = latest.get(key, (None, None))
        limits = ctrl.get(key) or ctrl_default or no_limits

        rows.append(DashboardRow(
            site_db=key,
            site_slug=site_slug(key),
            name=site.name,
            last_at=last_at,
            lag_min=lag_minutes(now, last_at),
            count_1h=count_1h.get(key, 0),
            count_24h=count_24h.get(key, 0),
            he_psi=he_psi,
            he_pct=he_pct,
            status=classify(last_at, since_1h, since_24h),
            he_psi_out_of_range=is_out_of_range(he_psi, limits.mrplel, limits.mrpleh),
            he_pct_out_of_range=is_out_of_range(he_pct, limits.mrlevl, limits.mrlevh),
        ))

    rows = sort_by_last_at(rows)

    logger.debug(
        f"Dashboard built: {len(rows)} sites in {(time.perf_counter() - started) * 1000:.1f}ms"
    )

    return DashboardResponse(
        meta=DashboardMeta(
            now_ms=to_ms(now),
            since_1h_ms=to_ms(since_1h),
            since_24h_ms=to_ms(since_24h),
        ),
        stats=summarize(rows, since_1h, since_24h),
        rows=rows,
        ctrl=ctrl,
        ctrl_default=ctrl_default,
    )
