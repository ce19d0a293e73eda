"""
Shared pytest configuration for arena tests.

By default tests run against an in-memory SQLite database (aiosqlite), so no
server is needed. Set TEST_DATABASE_URL to run against PostgreSQL instead.

SAFETY: a TEST_DATABASE_URL whose database name does not contain "test" is
refused, so a misconfigured environment cannot drop a real database.
"""

import os

# Rate limiting is a no-op in test mode; must be set before the routes import
os.environ.setdefault("ENV", "test")

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool, StaticPool  # noqa: E402
from arena.database.db import Base  # noqa: E402

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


def _resolve_test_database_url() -> str:
    """Resolve the test database URL with safety checks.

    Raises ``RuntimeError`` if TEST_DATABASE_URL points at a database whose
    name does not contain "test".
    """
    url = os.getenv("TEST_DATABASE_URL", "")
    if not url:
        return SQLITE_MEMORY_URL

    # ── Safety gate: database name MUST contain "test" ──────────────────
    db_name = url.rsplit("/", 1)[-1].split("?")[0]
    if "test" not in db_name.lower():
        raise RuntimeError(
            f"\n{'=' * 70}\n"
            f"  SAFETY: Refusing to run tests against database '{db_name}'.\n"
            f"  The database name must contain 'test' to prevent accidental\n"
            f"  data loss in development or production databases.\n\n"
            f"  Fix: set TEST_DATABASE_URL to a test database, e.g.:\n"
            f"    export TEST_DATABASE_URL=postgresql+asyncpg://.../arena_test\n"
            f"  Or unset it to use in-memory SQLite.\n"
            f"{'=' * 70}"
        )
    return url


# Validated at import time so pytest fails immediately on a bad URL
TEST_DATABASE_URL = _resolve_test_database_url()


def _make_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection, otherwise every session gets its own empty database
        return create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a fresh schema per test and point db.AsyncSessionLocal at it."""
    engine = _make_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # Startup helpers (init_defaults, seed_catalog) open their own sessions
    from arena.database import db

    original_async_session_local = db.AsyncSessionLocal
    db.AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    yield engine

    db.AsyncSessionLocal = original_async_session_local

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """
    Test database session. Service tests flush rather than commit, and the
    session is rolled back afterwards.
    """
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()
