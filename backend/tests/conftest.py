import os
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from inventory_api.config import ApiToken, settings
from inventory_api.db.session import Base, get_db
from inventory_api.main import app

# Pytest only picks up fixtures from conftest.py files. Fixtures defined in other
# modules (like tests/seeds.py) are invisible unless we register them here.
# A plain `import tests.seeds` won't work; pytest_plugins is the way to do it.
pytest_plugins = ["tests.seeds"]

# Point at Postgres to run against the production dialect, e.g.
# TEST_DATABASE_URL=postgresql+asyncpg://inventory@localhost:5432/inventory_test
# Otherwise every test gets its own throwaway SQLite file.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

USER_TOKEN = "user-token"
ADMIN_TOKEN = "admin-token"


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'inventory_test.db'}"
    engine = create_async_engine(url, poolclass=NullPool)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Create tables and yield a session, then drop tables after test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_sessionmaker(engine, expire_on_commit=False)() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def api_tokens(monkeypatch: pytest.MonkeyPatch) -> dict[str, ApiToken]:
    """One USER and one ADMIN bearer token."""
    tokens = {
        USER_TOKEN: ApiToken(username="alice", roles=["USER"]),
        ADMIN_TOKEN: ApiToken(username="root", roles=["USER", "ADMIN"]),
    }
    monkeypatch.setattr(settings, "api_tokens", tokens)
    return tokens


@pytest.fixture
def user_headers(api_tokens: dict[str, ApiToken]) -> dict[str, str]:
    return {"Authorization": f"Bearer {USER_TOKEN}"}


@pytest.fixture
def admin_headers(api_tokens: dict[str, ApiToken]) -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest_asyncio.fixture
async def client(db: AsyncSession, api_tokens: dict[str, ApiToken]) -> AsyncIterator[AsyncClient]:
    """HTTP client that uses the test database session.

    Mirrors ``get_db``: each request commits on success and rolls back on
    error, so a failed request leaves the session usable for the next one.
    """

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
