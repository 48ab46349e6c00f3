"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Tests use an in-memory SQLite database through aiosqlite. A StaticPool
    keeps the single connection alive so every session sees the same data.
"""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from notorica.core.config import get_app_config, get_settings
from notorica.core.config_schema import StorageKeysSchema
from notorica.models import Base
from notorica.services.storage import MemoryKeyValueStore, SqlKeyValueStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Database Engine Fixtures
# =============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with the kv_store table."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a database session for a single test.

    Changes are rolled back after the test.
    """
    async with db_session_factory() as session:
        yield session
        await session.rollback()


# =============================================================================
# Key-Value Store Fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    """Empty dict-backed store."""
    return MemoryKeyValueStore()


@pytest.fixture
def sql_store(db_session_factory: async_sessionmaker[AsyncSession]) -> SqlKeyValueStore:
    """Store backed by the in-memory kv_store table."""
    return SqlKeyValueStore(db_session_factory)


@pytest.fixture
def storage_keys() -> StorageKeysSchema:
    """Storage keys exactly as configured in storage.yaml."""
    return get_app_config().storage.keys


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def clear_config_cache():
    """Clear lru_cache so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()
