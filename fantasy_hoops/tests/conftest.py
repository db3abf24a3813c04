"""
Shared pytest configuration for fantasy_hoops tests.

Each test gets its own SQLite database file (sqlite+aiosqlite) under
pytest's tmp_path, so tests never touch a development or production
database and need no running server.
"""

import os

# Rate limits are disabled when ENV=test; must be set before the routes import
os.environ.setdefault("ENV", "test")

import pytest_asyncio

from fantasy_hoops.database import db
from fantasy_hoops.models.schemas import LeagueCreate, UserUpsert
from fantasy_hoops.services.domain_store import DomainStore


class StubRevenueLedger:
    """Revenue ledger returning a fixed figure."""

    def __init__(self, revenue: float = 0.0):
        self.revenue = revenue
        self.calls = 0

    async def monthly_revenue(self) -> float:
        self.calls += 1
        return self.revenue


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Engine on a fresh SQLite file with all tables created."""
    engine = db.create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.init_database(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def revenue_ledger():
    return StubRevenueLedger(revenue=1234.5)


@pytest_asyncio.fixture
async def store(test_engine, revenue_ledger):
    """DomainStore over the test engine."""
    return DomainStore(db.create_session_maker(test_engine), revenue_ledger)


@pytest_asyncio.fixture
async def test_user(store):
    """A user created the way a first login creates one."""
    return await store.upsert_user(
        UserUpsert(id="u1", email="u1@example.com", first_name="Uma", last_name="One")
    )


@pytest_asyncio.fixture
async def other_user(store):
    return await store.upsert_user(UserUpsert(id="u2", email="u2@example.com", first_name="Vic"))


@pytest_asyncio.fixture
async def test_league(store, test_user):
    """A league owned by test_user (which also gives test_user a fantasy team)."""
    return await store.create_league(
        LeagueCreate(name="Friends League", owner_id=test_user["id"], max_teams=10, season="2023-24")
    )
