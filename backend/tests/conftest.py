"""
QuoteBook Backend — Test Configuration (conftest.py)
======================================================

Fixture Hierarchy (all function-scoped):
    ├── memory_store / store[memory|sql]: a fresh, empty QuoteStore
    ├── sql_engine: SQLite in-memory engine with the quotes table created
    ├── api_store + test_client: the app over HTTPX, backed by a memory store
    └── sql_client: the app over HTTPX, backed by SQLite through session_scope

No fixture touches the module-level engine or the memory singleton, so
tests never share state.
"""

import os

# Must be set before quotebook.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORE_BACKEND"] = "memory"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("CLIENT_BUILD_DIR", None)
os.environ.pop("SEED_FILE", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quotebook.database import Base, session_scope
from quotebook.models.quote import Quote  # noqa: F401
from quotebook.services.quote_store import (
    MemoryQuoteStore,
    SqlQuoteStore,
    get_quote_store,
)


@pytest.fixture
def ada_quote():
    return {"author": "Ada", "content": "Hello", "category": "tech"}


@pytest.fixture
def memory_store():
    return MemoryQuoteStore()


@pytest_asyncio.fixture
async def sql_engine():
    """
    One shared in-memory SQLite connection (StaticPool), so every session
    opened during the test sees the same tables.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request, sql_engine):
    """Runs the test once per store implementation."""
    if request.param == "memory":
        yield MemoryQuoteStore()
        return

    factory = async_sessionmaker(sql_engine, expire_on_commit=False)
    async with factory() as session:
        yield SqlQuoteStore(session)


@pytest.fixture
def api_store():
    return MemoryQuoteStore()


async def _client_for(override):
    from quotebook.main import app

    app.dependency_overrides[get_quote_store] = override
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(api_store):
    """
    HTTPX client for the app with a fresh memory store.

    Usage:
        async def test_index(test_client):
            response = await test_client.get("/quotes")
    """
    async def override():
        yield api_store

    async for client in _client_for(override):
        yield client


@pytest_asyncio.fixture
async def sql_client(sql_engine):
    """HTTPX client for the app with one committed SQLite session per request."""
    factory = async_sessionmaker(sql_engine, expire_on_commit=False)

    async def override():
        async with session_scope(factory) as session:
            yield SqlQuoteStore(session)

    async for client in _client_for(override):
        yield client
