"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - db_manager patched so the readiness probe sees the test engine
    - client sends the test admin bearer token; anon_client sends none

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - load_metal/load_rates read through a fresh session: the seeding session's
      identity map would otherwise return stale objects after a route writes
"""

from datetime import date
from uuid import UUID

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from metal_api.db.base import Base
from metal_api.infrastructure.database import get_db, DatabaseSessionManager
from metal_api.models.metal import Metal
from metal_api.models.metal_rate import MetalRate
import metal_api.infrastructure.database as db_module
from metal_api.main import app

TEST_ADMIN_TOKEN = "test-admin-token"
TEST_ADMIN_ID = UUID("00000000-0000-0000-0000-0000000000a1")
AUTH_HEADERS = {"Authorization": f"Bearer {TEST_ADMIN_TOKEN}"}
METALS_URL = "/api/v1/admin/metals"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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


def _make_client(test_engine, test_session_factory, headers, raise_app_exceptions=True):
    """Build an AsyncClient with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    return AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
        base_url="http://test",
        headers=headers,
    )


@pytest.fixture
async def client(test_engine, test_session_factory):
    """Authenticated admin client."""
    original_manager = db_module.db_manager
    async with _make_client(test_engine, test_session_factory, AUTH_HEADERS) as c:
        yield c
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def anon_client(test_engine, test_session_factory):
    """Client without an Authorization header."""
    original_manager = db_module.db_manager
    async with _make_client(test_engine, test_session_factory, {}) as c:
        yield c
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def lenient_client(test_engine, test_session_factory):
    """Admin client that returns 500 responses instead of re-raising app errors."""
    original_manager = db_module.db_manager
    async with _make_client(
        test_engine, test_session_factory, AUTH_HEADERS, raise_app_exceptions=False,
    ) as c:
        yield c
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_metals(test_db):
    """Insert three metals: Gold, Silver, Platinum (Platinum inactive)."""
    metals = [
        Metal(name="Gold", symbol="Au", purity=99.9, unit="gram"),
        Metal(name="Silver", symbol="Ag", purity=92.5, unit="gram"),
        Metal(name="Platinum", symbol="Pt", purity=95.0, unit="gram", is_active=False),
    ]
    test_db.add_all(metals)
    await test_db.commit()
    return {m.name: m for m in metals}


@pytest.fixture
async def copper(test_db, seed_metals):
    """A fourth metal with no symbol."""
    metal = Metal(name="Copper", purity=99.0, unit="gram")
    test_db.add(metal)
    await test_db.commit()
    return metal


@pytest.fixture
async def seed_rates(test_db, seed_metals):
    """Two rates for Gold, one for Silver, none for Platinum."""
    gold, silver = seed_metals["Gold"], seed_metals["Silver"]
    rates = [
        MetalRate(metal_id=gold.id, rate=74.1, effective_date=date(2026, 10, 1)),
        MetalRate(metal_id=gold.id, rate=75.3, effective_date=date(2026, 10, 2)),
        MetalRate(metal_id=silver.id, rate=0.92, effective_date=date(2026, 10, 1)),
    ]
    test_db.add_all(rates)
    await test_db.commit()
    return rates


@pytest.fixture
def load_metal(test_session_factory):
    """Read a Metal by id through a fresh session."""
    async def _load(metal_id):
        async with test_session_factory() as session:
            return await session.get(Metal, metal_id)
    return _load


@pytest.fixture
def load_rates(test_session_factory):
    """Read all rates of a metal through a fresh session."""
    async def _load(metal_id):
        async with test_session_factory() as session:
            result = await session.execute(
                select(MetalRate).where(MetalRate.metal_id == metal_id),
            )
            return list(result.scalars().all())
    return _load
