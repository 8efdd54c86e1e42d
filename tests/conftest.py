"""Test fixtures — fresh realtime state and an in-memory database per test.

Learn: The process-wide registry and broadcaster are never used by tests.
Each test gets its own ConnectionRegistry + EventBroadcaster, wired into
the app through dependency overrides, so no subscriber leaks between tests.

The database is SQLite in memory (StaticPool keeps the single connection
alive for the whole test), created from the ORM metadata.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from newswire.db.engine import get_db
from newswire.db.models import Base
from newswire.main import app
from newswire.realtime.broadcaster import EventBroadcaster, get_broadcaster
from newswire.realtime.registry import ConnectionRegistry, get_registry

from fakes import RecordingSink

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture()
def registry():
    return ConnectionRegistry()


@pytest.fixture()
def broadcaster(registry):
    return EventBroadcaster(registry)


@pytest.fixture()
def listener(registry):
    """A subscriber already registered before the test body runs."""
    sink = RecordingSink("listener")
    registry.register(sink)
    return sink


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a brand new in-memory database."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session, registry, broadcaster):
    """HTTP client with the app's DB and realtime dependencies overridden."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
