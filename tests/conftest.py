"""Shared test fixtures for the Jenifer API test suite."""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from jenifer_api.core.database import Base, get_db, get_session_factory
from jenifer_api.main import app
from jenifer_api.models.core import ExecutiveProfile, Organization, User
from jenifer_api.services.ai_gateway import get_text_generator

# ── Sample identifiers ────────────────────────────────────────────────────

SAMPLE_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
SAMPLE_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
SAMPLE_EXECUTIVE_ID = uuid.UUID("00000000-0000-0000-0000-000000000003")
OTHER_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000009")

# Saturday, 17 Oct 2026 13:30 UTC = 9:30 AM in New York
FIXED_NOW = datetime(2026, 10, 17, 13, 30, tzinfo=timezone.utc)

GENERATED_BRIEF = "## Meeting Overview\n- Quarterly review with Acme"


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Fresh on-disk SQLite database per test.

    The builder opens one session per concurrent fetch, so fixtures must
    commit their rows for those sessions to see them.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def generator() -> AsyncMock:
    """Stand-in text generator returning a fixed brief."""
    mock = AsyncMock()
    mock.generate.return_value = GENERATED_BRIEF
    return mock


@pytest.fixture
async def client(session_factory, generator) -> AsyncGenerator[AsyncClient]:
    async def _get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_text_generator] = lambda: generator
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


# ── Sample data fixtures ──────────────────────────────────────────────────


@pytest.fixture
async def sample_org(db: AsyncSession) -> Organization:
    org = Organization(
        id=SAMPLE_ORG_ID,
        name="Test Org",
        slug="test-org",
        ai_settings={"tone": "formal"},
    )
    db.add(org)
    await db.commit()
    return org


@pytest.fixture
async def other_org(db: AsyncSession) -> Organization:
    org = Organization(id=OTHER_ORG_ID, name="Other Org", slug="other-org")
    db.add(org)
    await db.commit()
    return org


@pytest.fixture
async def sample_user(db: AsyncSession, sample_org: Organization) -> User:
    user = User(
        id=SAMPLE_USER_ID,
        org_id=sample_org.id,
        email="assistant@example.com",
        full_name="Test Assistant",
        timezone="America/New_York",
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def sample_executive(db: AsyncSession, sample_org: Organization) -> ExecutiveProfile:
    executive = ExecutiveProfile(
        id=SAMPLE_EXECUTIVE_ID,
        org_id=sample_org.id,
        full_name="Dana Whitfield",
        title="CEO",
        timezone="America/New_York",
        scheduling_preferences={"no_meetings_before": "09:00", "buffer_minutes": 15},
        communication_style="Direct, bullet points only",
        office_address={"line1": "1 Main St", "city": "New York", "country": "US"},
    )
    db.add(executive)
    await db.commit()
    return executive
