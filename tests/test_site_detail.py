"""
Tests for the site detail service.
"""

import asyncio

import pytest

from app.models import Site
from app.services.site_detail import clamp_take, get_site_detail
from conftest import minutes_ago, reading


def detail(session_maker, slug, take=200):
    async def run():
        async with session_maker() as session:
            return await get_site_detail(session, slug, take)

    return asyncio.run(run())


class TestClampTake:
    """Tests for row limit clamping."""

    @pytest.mark.parametrize("raw,expected", [
        (None, 200),
        ("", 200),
        ("abc", 200),
        ("NaN", 200),
        ("Infinity", 200),
        ("10", 50),
        ("500", 500),
        ("5000", 1000),
        ("75.9", 75),
        (300, 300),
    ])
    def test_detail_bounds(self, raw, expected):
        assert clamp_take(raw, 50, 1000, 200) == expected

    @pytest.mark.parametrize("raw,expected", [
        (None, 50),
        ("1", 10),
        ("20", 20),
        ("101", 100),
    ])
    def test_chart_bounds(self, raw, expected):
        assert clamp_take(raw, 10, 100, 50) == expected


class TestGetSiteDetail:
    """Tests for per-site time series."""

    def test_unknown_slug_is_none(self, session_maker, seed):
        seed(Site(site="001"))

        assert detail(session_maker, "5") is None

    def test_known_site_without_readings(self, session_maker, seed):
        seed(Site(site="001", name="Seoul"))

        result = detail(session_maker, "1")

        assert result is not None
        assert result.rows == []
        assert result.last_at is None
        assert result.site.site_db == "001"
        assert result.site.name == "Seoul"

    def test_rows_newest_first_and_limited(self, session_maker, seed):
        seed(
            Site(site="001"),
            *[reading("001", minutes_ago(m), hepres=str(m)) for m in (30, 10, 20, 40)],
        )

        result = detail(session_maker, "1", take=3)

        assert [r.hepres for r in result.rows] == [10.0, 20.0, 30.0]
        assert result.last_at == minutes_ago(10)
        assert result.take == 3
        assert result.slug == "1"

    def test_fields_coerced_strictly(self, session_maker, seed):
        seed(
            Site(site="001"),
            reading("001", minutes_ago(1), hepres="12.5", heleve="80%", actemp=" 21 ", achumi="--"),
        )

        row = detail(session_maker, "001").rows[0]

        assert row.hepres == 12.5
        assert row.heleve is None
        assert row.actemp == 21.0
        assert row.achumi is None

    def test_undated_and_foreign_rows_excluded(self, session_maker, seed):
        seed(
            Site(site="001"),
            Site(site="002"),
            reading("001", None, hepres="1"),
            reading("002", minutes_ago(1), hepres="2"),
            reading("001", minutes_ago(2), hepres="3"),
        )

        result = detail(session_maker, "1")

        assert [r.hepres for r in result.rows] == [3.0]
