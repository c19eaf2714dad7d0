"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Awaitable, Callable

# Must be set before any app imports that trigger Settings validation.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from models.base import Base  # noqa: E402


@pytest.fixture
def database_url() -> str:
    """
    Database for the test run.

    SQLite in memory by default; point TEST_DATABASE_URL at a PostgreSQL
    database (postgresql+asyncpg://...) to run against the production dialect.
    """
    return os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine with a fresh schema for each test."""
    if database_url.startswith("sqlite"):
        # One shared connection keeps the in-memory database alive for the test
        engine = create_async_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session; services only flush, so nothing is committed."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def insert_raw_bookmark(db_session: AsyncSession) -> Callable[..., Awaitable[int]]:
    """
    Insert a bookmark row with SQL, bypassing the ORM column types.

    Used to store timestamp text the application would never write itself, as
    found in rows imported from older databases. SQLite only: PostgreSQL
    rejects such values on insert.
    """

    async def insert(
        title: str,
        timestamp: str,
        action: str | None = None,
        topic: str | None = None,
    ) -> int:
        if db_session.bind.dialect.name != "sqlite":
            pytest.skip("only SQLite can store unparseable timestamp text")
        result = await db_session.execute(
            text(
                "INSERT INTO bookmarks (url, title, action, topic, tags, custom_properties, timestamp) "  # noqa: E501
                "VALUES (:url, :title, :action, :topic, '[]', '{}', :timestamp)",
            ),
            {
                "url": f"https://example.com/{title}",
                "title": title,
                "action": action,
                "topic": topic,
                "timestamp": timestamp,
            },
        )
        return result.lastrowid

    return insert


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session override."""
    # Clear the settings cache so it picks up DATABASE_URL from environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
