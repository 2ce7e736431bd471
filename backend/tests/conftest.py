"""
Catalog Backend: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession (service tests, no DB needed)
    ├── db_engine: aiosqlite engine on a temp file with the schema created
    ├── db_session: AsyncSession bound to db_engine (repository tests)
    ├── category / product: rows inserted through db_session
    ├── product_payload: valid create payload (random category_id)
    └── test_client: HTTPX AsyncClient talking to the app over db_engine
"""

import os

# Settings are read at import time; point them at SQLite before any catalog import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from catalog.database import Base, build_engine, get_db_session
from catalog.models.category import Category
from catalog.models.product import Product


# ══════════════════════════════════════════════════════════════════════════
# Mock Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_product(mock_db_session):
            with patch("catalog.services.product_service.ProductRepository") as repo_cls:
                ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures (aiosqlite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database file per test, schema created from the ORM metadata."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def category(db_session) -> Category:
    row = Category(name="Tools", description="Hand and power tools")
    db_session.add(row)
    await db_session.flush()
    return row


@pytest_asyncio.fixture
async def product(db_session, category) -> Product:
    row = Product(
        name="Hammer",
        price=Decimal("12.50"),
        stock_quantity=3,
        category_id=category.id,
    )
    db_session.add(row)
    await db_session.flush()
    return row


@pytest.fixture
def product_payload():
    """Valid create payload; category_id points nowhere until a test swaps it in."""
    return {
        "name": "Widget",
        "description": "A very useful widget",
        "price": "9.99",
        "stock_quantity": 5,
        "category_id": str(uuid4()),
    }


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient wired to the FastAPI app.

    get_db_session is overridden so every request gets its own session on
    the per-test SQLite database, with the same commit/rollback behavior.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from catalog.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
