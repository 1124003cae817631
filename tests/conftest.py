"""
Pytest configuration and fixtures for Helium Site Monitor tests.
"""

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Settings are read at import time; point them at a throwaway database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from app.core.database import Base  # noqa: E402
from app.models import CtrlRange, Reading, Site  # noqa: E402


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def session_maker(tmp_path):
    """Session factory bound to a fresh SQLite file with all tables created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'monitor.db'}",
        poolclass=NullPool,
    )

    async def create_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_schema())

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    asyncio.run(engine.dispose())


@pytest.fixture
def seed(session_maker):
    """Insert ORM objects: seed(Site(...), Reading(...), ...)."""

    def _seed(*objects):
        async def insert():
            async with session_maker() as session:
                session.add_all(objects)
                await session.commit()

        asyncio.run(insert())

    return _seed


@pytest.fixture
def client(session_maker):
    """TestClient whose handlers use the test database."""
    from fastapi.testclient import TestClient

    from app.api.main import app
    from app.core.database import get_session_maker

    app.dependency_overrides[get_session_maker] = lambda: session_maker
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def reading(siteid, date, hepres=None, heleve=None, actemp=None, achumi=None, **kwargs):
    """Reading with sensor values given as the raw text a site would send."""
    return Reading(
        siteid=siteid,
        date=date,
        hepres=hepres,
        heleve=heleve,
        actemp=actemp,
        achumi=achumi,
        **kwargs,
    )


def minutes_ago(minutes: float, now: datetime = NOW) -> datetime:
    return now - timedelta(minutes=minutes)
