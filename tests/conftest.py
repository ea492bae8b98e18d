"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine, session and a seeded table
    - Pagination Fixtures: paginator, sort sets and an in-memory stash
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from keyset_pagination.core.pagination import (
    Paginator,
    SortDirection,
    SortItem,
    SQLiteDialect,
)
from keyset_pagination.core.settings import clear_all_caches
from tests.utils import AGES, EPOCH, Base, InMemoryStash, Person, people

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env overrides in one test do not leak."""
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session on a fresh schema; tables are dropped afterwards."""
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def seeded_session(db_session: AsyncSession) -> AsyncSession:
    """Session with the ``AGES`` rows inserted."""
    db_session.add_all(
        Person(
            id=person_id,
            name=f"person-{person_id}",
            age=age,
            joined_at=EPOCH + timedelta(hours=person_id % 4),
        )
        for person_id, age in AGES.items()
    )
    await db_session.commit()
    return db_session


# ============================================================================
# Pagination Fixtures
# ============================================================================


@pytest.fixture
def paginator() -> Paginator:
    return Paginator(SQLiteDialect())


@pytest.fixture
def by_id() -> list[SortItem]:
    return [SortItem(people.c.id)]


@pytest.fixture
def by_age_desc() -> list[SortItem]:
    """Nullable DESC column with the primary key as tie-breaker."""
    return [
        SortItem(people.c.age, direction=SortDirection.DESC, nullable=True),
        SortItem(people.c.id),
    ]


@pytest.fixture
def by_age_asc() -> list[SortItem]:
    return [
        SortItem(people.c.age, nullable=True),
        SortItem(people.c.id),
    ]


@pytest.fixture
def stash() -> InMemoryStash:
    return InMemoryStash()
