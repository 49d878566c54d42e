"""Pytest configuration and fixtures."""

import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.database.models import Base, ProfileModel
from infrastructure.database.session import create_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory, one connection shared by the test)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return create_session_factory(engine)


@pytest.fixture
def uow_factory(session_factory: async_sessionmaker[AsyncSession]):
    """Unit-of-work factory over the test database."""
    return lambda: SQLAlchemyUnitOfWork(session_factory)


@pytest.fixture
def make_profile(session_factory: async_sessionmaker[AsyncSession]):
    """Insert a profile row and return its ID."""

    async def _make(display_name: str = "Rider", city: str | None = None) -> UUID:
        profile_id = uuid4()
        async with session_factory() as session:
            session.add(
                ProfileModel(
                    id=profile_id,
                    email=f"{profile_id.hex[:8]}@example.com",
                    display_name=display_name,
                    city=city,
                )
            )
            await session.commit()
        return profile_id

    return _make
