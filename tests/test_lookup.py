"""
Tests for slug handling, slug resolution, ordering and search.
"""

import asyncio

import pytest

from app.models import Site
from app.services.lookup import (
    find_site_by_slug,
    search_sites,
    site_slug,
    slug_candidates,
    sort_by_slug,
)


def resolve(session_maker, slug):
    async def run():
        async with session_maker() as session:
            return await find_site_by_slug(session, slug)

    return asyncio.run(run())


class TestSiteSlug:
    """Tests for display slug derivation."""

    def test_zero_padded_key_loses_padding(self):
        assert site_slug("007") == "7"

    def test_all_zeros(self):
        assert site_slug("000") == "0"

    def test_non_numeric_key_unchanged(self):
        assert site_slug("A12") == "A12"

    def test_padded_and_plain_keys_collide(self):
        """Known lossy mapping: two stored keys share one slug."""
        assert site_slug("007") == site_slug("7")


class TestSlugCandidates:
    """Tests for the keys a slug may refer to."""

    def test_numeric_slug_tries_literal_then_padded(self):
        assert slug_candidates("7") == ["7", "007"]

    def test_already_padded_slug_is_not_duplicated(self):
        assert slug_candidates("007") == ["007"]

    def test_long_numeric_slug(self):
        assert slug_candidates("1234") == ["1234"]

    def test_non_numeric_slug_is_literal(self):
        assert slug_candidates("abc") == ["abc"]


class TestFindSiteBySlug:
    """Tests for slug resolution against the site table."""

    def test_resolves_padded_key(self, session_maker, seed):
        seed(Site(site="007", name="Padded"))

        site = resolve(session_maker, "7")

        assert site is not None
        assert site.site == "007"

    def test_literal_key_wins_over_padded(self, session_maker, seed):
        seed(Site(site="007", name="Padded"), Site(site="7", name="Literal"))

        site = resolve(session_maker, "7")

        assert site.site == "7"
        assert site.name == "Literal"

    def test_round_trip_from_display_slug(self, session_maker, seed):
        seed(Site(site="007", name="Padded"))

        site = resolve(session_maker, site_slug("007"))

        assert site.site == "007"

    def test_non_numeric_slug_is_exact(self, session_maker, seed):
        seed(Site(site="abc"))

        assert resolve(session_maker, "abc").site == "abc"
        assert resolve(session_maker, "ABC") is None

    def test_unknown_slug(self, session_maker, seed):
        seed(Site(site="001"))

        assert resolve(session_maker, "2") is None


class TestSortBySlug:
    """Tests for on-screen ordering."""

    def test_numeric_before_text(self):
        assert sort_by_slug(["10", "2", "abc", "1"]) == ["1", "2", "10", "abc"]

    def test_text_sorted_lexicographically(self):
        assert sort_by_slug(["b", "3", "a", "B"]) == ["3", "B", "a", "b"]

    def test_key_function(self):
        rows = [{"slug": "12"}, {"slug": "x"}, {"slug": "9"}]

        ordered = sort_by_slug(rows, lambda r: r["slug"])

        assert [r["slug"] for r in ordered] == ["9", "12", "x"]


class TestSearchSites:
    """Tests for scored site search."""

    @pytest.fixture
    def sites(self):
        return [
            Site(site="001", name="Seoul North"),
            Site(site="010", name="Busan"),
            Site(site="011", name="Daegu 1"),
            Site(site="100", name="Incheon"),
            Site(site="lab", name="Test bench"),
        ]

    def test_empty_query_returns_preview(self, sites):
        assert search_sites(sites, "  ", preview=2) == sites[:2]

    def test_exact_slug_ranks_first(self, sites):
        results = search_sites(sites, "1")

        # "001" -> slug "1": exact + prefix + contains
        assert results[0].site == "001"

    def test_stored_key_prefix(self, sites):
        results = search_sites(sites, "01")

        # "010"/"011" are key prefixes; "001" only contains the query
        assert [s.site for s in results] == ["010", "011", "001"]

    def test_name_match_is_case_insensitive(self, sites):
        results = search_sites(sites, "BUSAN")

        assert [s.site for s in results] == ["010"]

    def test_substring_match(self, sites):
        results = search_sites(sites, "bench")

        assert [s.site for s in results] == ["lab"]

    def test_no_match(self, sites):
        assert search_sites(sites, "zzz") == []

    def test_limit(self, sites):
        assert len(search_sites(sites, "1", limit=2)) == 2
