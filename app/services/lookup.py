"""
Site Lookup Service - slugs, slug resolution, ordering and search

Stored keys may be zero-padded legacy codes ("007"). Users see the slug,
which drops the padding. The mapping is lossy: "007" and "7" share slug "7".
"""

import logging
from typing import Iterable, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.site import Site

logger = logging.getLogger(__name__)

T = TypeVar("T")

SLUG_PAD_WIDTH = 3

# Search scoring weights
SCORE_EXACT = 100
SCORE_PREFIX = 60
SCORE_NAME_PREFIX = 40
SCORE_CONTAINS = 10


def is_numeric(value: str) -> bool:
    """ASCII digits only (str.isdigit also accepts superscripts etc.)."""
    return bool(value) and value.isascii() and value.isdigit()


def site_slug(site_db: str) -> str:
    """Display slug for a stored key: "007" -> "7", "abc" -> "abc"."""
    if is_numeric(site_db):
        return str(int(site_db))
    return site_db


def slug_candidates(slug: str) -> list[str]:
    """Stored keys a slug may refer to, in priority order."""
    if not is_numeric(slug):
        return [slug]
    padded = slug.zfill(SLUG_PAD_WIDTH)
    return [slug] if padded == slug else [slug, padded]


async def find_site_by_slug(session: AsyncSession, slug: str) -> Site | None:
    """
    Resolve a slug to a Site.

    The literal key wins over the zero-padded one: "7" resolves to site "7"
    when it exists, otherwise to "007".
    """
    candidates = slug_candidates(slug)
    result = await session.execute(select(Site).where(Site.site.in_(candidates)))
    by_key = {s.site: s for s in result.scalars().all()}

    for key in candidates:
        if key in by_key:
            return by_key[key]

    logger.warning(f"Unknown site slug: {slug!r}")
    return None


def slug_sort_key(slug: str) -> tuple:
    """Numeric slugs first (by value), then the rest lexicographically."""
    if is_numeric(slug):
        return (0, int(slug), "")
    return (1, 0, slug)


def sort_by_slug(items: Iterable[T], slug_of=lambda item: item) -> list[T]:
    """On-screen ordering for listings."""
    return sorted(items, key=lambda item: slug_sort_key(slug_of(item) or ""))


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


def score_site(query: str, slug: str, site_db: str, name: str | None) -> int:
    """Relevance of one site for an already-normalized query."""
    slug, site_db, name = _norm(slug), _norm(site_db), _norm(name)

    score = 0
    if query in (slug, site_db):
        score += SCORE_EXACT
    if slug.startswith(query) or site_db.startswith(query):
        score += SCORE_PREFIX
    if name.startswith(query):
        score += SCORE_NAME_PREFIX
    if query in slug or query in site_db or query in name:
        score += SCORE_CONTAINS
    return score


def search_sites(
    sites: Sequence[Site],
    query: str | None,
    limit: int = 50,
    preview: int = 30,
) -> list[Site]:
    """
    Rank sites against a free-text query.

    An empty query returns the first `preview` sites unranked. Otherwise sites
    with a positive score are returned best first; equal scores keep their
    input order.
    """
    q = _norm(query)
    if not q:
        return list(sites[:preview])

    scored = []
    for site in sites:
        score = score_site(q, site_slug(site.site), site.site, site.name)
        if score > 0:
            scored.append((score, site))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [site for _, site in scored[:limit]]
