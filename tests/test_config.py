"""
Tests for environment-driven settings.
"""

from app.core.config import Settings


class TestSettings:
    """Tests for Settings defaults and overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/monitor")

        settings = Settings(_env_file=None)

        assert settings.default_ctrl_site == "000"
        assert settings.detail_take_bounds == (50, 1000, 200)
        assert settings.chart_take_bounds == (10, 100, 50)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/monitor")
        monkeypatch.setenv("DETAIL_TAKE_MIN", "10")
        monkeypatch.setenv("DETAIL_TAKE_MAX", "100")
        monkeypatch.setenv("DETAIL_TAKE_DEFAULT", "50")
        monkeypatch.setenv("DEFAULT_CTRL_SITE", "999")

        settings = Settings(_env_file=None)

        assert settings.detail_take_bounds == (10, 100, 50)
        assert settings.default_ctrl_site == "999"
        assert settings.database_url.startswith("postgresql+asyncpg://")
