"""
Top-level pytest configuration.

Provides:
  - A test SQLite database (aiosqlite) with all tables created fresh per test.
  - A db_session fixture that rolls back each test in a transaction.
  - An async_client fixture wired to the FastAPI app.
  - Persisted principals of each kind with matching bearer headers.
"""

from __future__ import annotations

import os
from typing import AsyncGenerator

# ---------------------------------------------------------------------------
# Environment must be set BEFORE any worklink module is imported so that
# pydantic-settings picks up the test values.
# ---------------------------------------------------------------------------
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-32c")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from worklink.models.principals import PrincipalRole
from tests.factories import ManufacturerFactory, StartupFactory, WorkerFactory

TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)


# ---------------------------------------------------------------------------
# Test engine (SQLite in-memory, shared via StaticPool so all connections
# see the same data within a test).
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine():
    """Create the SQLite test engine and all tables."""
    # Import Base here (after env vars are set) to ensure models register.
    from worklink.core.database import Base
    import worklink.models  # noqa: F401

    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


# ---------------------------------------------------------------------------
# Per-test DB session that rolls back after each test for isolation.
#
# Each test runs inside one outer transaction that is rolled back. Endpoint
# code calls session.commit(); the session used here turns that into a
# flush so writes stay inside the outer transaction.
# ---------------------------------------------------------------------------
class _NonCommittingSession(AsyncSession):
    """AsyncSession subclass where commit() becomes flush()."""

    async def commit(self) -> None:  # type: ignore[override]
        await self.flush()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a per-test database session that is fully rolled back on teardown."""
    async with engine.connect() as conn:
        await conn.begin()  # outer real transaction

        session = _NonCommittingSession(
            bind=conn,
            expire_on_commit=False,
        )

        try:
            yield session
        finally:
            await session.close()
            await conn.rollback()


# ---------------------------------------------------------------------------
# Override FastAPI database dependency to use the test session.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an httpx AsyncClient backed by the FastAPI app.

    The app's get_db dependency is overridden to yield the test session so all
    requests in a test share the same transactional session and thus see any
    data seeded in that test.
    """
    from worklink.core.database import get_db
    from worklink.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seeded principals
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def test_worker(db_session: AsyncSession):
    """Persisted worker for integration tests."""
    return await WorkerFactory.create_async(
        db_session, name="Asha Patel", email="asha@example.com"
    )


@pytest_asyncio.fixture
async def test_startup(db_session: AsyncSession):
    """Persisted startup for integration tests."""
    return await StartupFactory.create_async(
        db_session, company_name="Loom Labs", company_email="hello@loomlabs.example"
    )


@pytest_asyncio.fixture
async def test_manufacturer(db_session: AsyncSession):
    """Persisted manufacturer for integration tests."""
    return await ManufacturerFactory.create_async(
        db_session, company_name="Forge Works", company_email="ops@forgeworks.example"
    )


def bearer_headers(principal, role: PrincipalRole) -> dict[str, str]:
    """Authorization headers carrying a valid token for ``principal``."""
    from worklink.core.security import create_access_token

    email = getattr(principal, "email", None) or getattr(principal, "company_email", None)
    token = create_access_token(principal.id, role, email=email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def worker_headers(test_worker) -> dict[str, str]:
    return bearer_headers(test_worker, PrincipalRole.WORKER)


@pytest.fixture
def startup_headers(test_startup) -> dict[str, str]:
    return bearer_headers(test_startup, PrincipalRole.STARTUP)


@pytest.fixture
def manufacturer_headers(test_manufacturer) -> dict[str, str]:
    return bearer_headers(test_manufacturer, PrincipalRole.MANUFACTURER)
