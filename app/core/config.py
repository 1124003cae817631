"""
Helium Site Monitor - Configuration
All settings loaded from environment variables
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (async SQLAlchemy URL, e.g. postgresql+asyncpg://...)
    database_url: str

    # ctrl row used when a site has no threshold range of its own
    default_ctrl_site: str = "000"

    # /api/sites/{slug} row limit
    detail_take_min: int = 50
    detail_take_max: int = 1000
    detail_take_default: int = 200

    # /api/sites/{slug}/chart.png row limit
    chart_take_min: int = 10
    chart_take_max: int = 100
    chart_take_default: int = 50

    # Timezone for chart axes
    tz: str = "Asia/Seoul"

    log_level: str = "INFO"

    @property
    def detail_take_bounds(self) -> tuple[int, int, int]:
        """(min, max, default) for the detail endpoint."""
        return self.detail_take_min, self.detail_take_max, self.detail_take_default

    @property
    def chart_take_bounds(self) -> tuple[int, int, int]:
        """(min, max, default) for the chart endpoint."""
        return self.chart_take_min, self.chart_take_max, self.chart_take_default

    class Config:
        env_file = ".env"  # Fallback for local development
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
