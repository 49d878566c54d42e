"""Unit tests for application context wiring."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from core.config import Settings
from core.exceptions import ServiceError
from state.context import build_context, create_context
from state.groups import GroupCollection
from state.posts import PostCollection
from state.session import UserSession
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        backend="database",
        database_url="sqlite+aiosqlite://",
        media_dir=tmp_path / "media",
        theme_preference_path=tmp_path / "prefs.json",
        roster_page_size=5,
    )


class TestBuildContext:
    def test_managers_share_session(self, settings: Settings, signed_in: UserSession):
        uow = FakeUnitOfWork()
        context = build_context(settings, lambda: uow, media=None, session=signed_in)

        groups = context.groups()
        posts = context.posts()

        assert isinstance(groups, GroupCollection)
        assert isinstance(posts, PostCollection)
        assert groups.current_user == signed_in.user
        assert posts.current_user == signed_in.user
        assert context.roster().page_size == 5

    def test_managers_are_independent(self, settings: Settings):
        context = build_context(settings, FakeUnitOfWork, media=None)

        assert context.groups() is not context.groups()

    @pytest.mark.asyncio
    async def test_aclose_runs_closers_once(self, settings: Settings):
        closer = AsyncMock()
        context = build_context(settings, FakeUnitOfWork, media=None, closers=[closer])

        await context.aclose()
        await context.aclose()

        closer.assert_awaited_once()


class TestCreateContext:
    @pytest.mark.asyncio
    async def test_database_backend(self, settings: Settings):
        context = await create_context(settings)
        try:
            groups = context.groups()
            result = await groups.load()
            assert result.success
            assert groups.items == []
        finally:
            await context.aclose()

    @pytest.mark.asyncio
    async def test_supabase_backend_requires_url(self, tmp_path: Path):
        settings = Settings(backend="supabase", supabase_url="", theme_preference_path=tmp_path / "p.json")

        with pytest.raises(ServiceError):
            await create_context(settings)
