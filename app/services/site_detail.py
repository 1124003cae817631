"""
Site Detail Service - recent time series for a single site
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import as_utc
from app.models.reading import Reading
from app.schemas import SiteDetailResponse, SiteDetailRow, SiteRef
from app.services.lookup import find_site_by_slug
from app.services.parsing import to_number


def clamp_take(raw: Any, lower: int, upper: int, default: int) -> int:
    """
    Row limit from user input.

    Anything that is not a finite number falls back to `default`; the result
    is then clamped into [lower, upper].
    """
    value = to_number(raw)
    if value is None:
        value = default
    return int(min(max(value, lower), upper))


async def fetch_recent_readings(session: AsyncSession, site_db: str, take: int) -> list[Reading]:
    """Newest `take` dated readings of one site, newest first."""
    result = await session.execute(
        select(Reading)
        .where(Reading.siteid == site_db, Reading.date.is_not(None))
        .order_by(Reading.date.desc(), Reading.index.desc())
        .limit(take)
    )
    return list(result.scalars().all())


def to_detail_row(reading: Reading) -> SiteDetailRow:
    return SiteDetailRow(
        index=reading.index,
        date=as_utc(reading.date),
        hepres=to_number(reading.hepres),
        heleve=to_number(reading.heleve),
        actemp=to_number(reading.actemp),
        achumi=to_number(reading.achumi),
    )


async def get_site_detail(
    session: AsyncSession,
    slug: str,
    take: int,
) -> Optional[SiteDetailResponse]:
    """
    Detail page for a slug, or None when the slug matches no site.

    A known site without readings yields empty rows and lastAt None.
    """
    site = await find_site_by_slug(session, slug)
    if site is None:
        return None

    readings = await fetch_recent_readings(session, site.site, take)
    rows = [to_detail_row(r) for r in readings]

    return SiteDetailResponse(
        slug=slug,
        site=SiteRef(site_db=site.site, name=site.name),
        take=take,
        last_at=rows[0].date if rows else None,
        rows=rows,
    )
