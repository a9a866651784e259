"""Service test fixtures — async DB, controllable clock + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check hits the test engine
    - get_clock overridden with a FakeClock the test can move past the deadline
    - get_settings overridden so tests choose the transfer denylist

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - StaticPool: every session shares the one in-memory connection
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from crowdvault.api.dependencies import get_clock
from crowdvault.config import Settings, get_settings
from crowdvault.db.base import Base
from crowdvault.infrastructure.database import get_db, DatabaseSessionManager
import crowdvault.infrastructure.database as db_module
import crowdvault.models  # noqa: F401  (registers tables on Base.metadata)
from crowdvault.main import app
from tests.services.api_helpers import (
    ADMIN_HEADERS, ALICE_HEADERS, BOB_HEADERS, CAMPAIGN_URL, DEADLINE_OFFSET,
    FakeClock,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Settings for the test app; tests may mutate transfer_denylist."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        transfer_denylist=["blocked-vendor"],
    )


@pytest.fixture
async def client(test_engine, test_session_factory, clock, settings):
    """FastAPI test client with DB, clock and settings dependencies overridden."""
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory

    # Route sessions go through the real manager so errors roll back like production
    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_settings] = lambda: settings

    original_manager = db_module.db_manager
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def deployed(client):
    """Campaign deployed by 'admin' with goal 1000 and a one-hour deadline."""
    response = await client.post(
        CAMPAIGN_URL,
        json={"goal": 1000, "deadline_offset_seconds": DEADLINE_OFFSET},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def funded(client, deployed):
    """Goal reached: alice 600 + bob 500."""
    for headers, amount in ((ALICE_HEADERS, 600), (BOB_HEADERS, 500)):
        response = await client.post(
            f"{CAMPAIGN_URL}/contributions",
            json={"amount": amount}, headers=headers,
        )
        assert response.status_code == 200
    return deployed
