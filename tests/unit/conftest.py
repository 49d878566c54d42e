"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from state.session import CurrentUser, UserSession


class FakeUnitOfWork:
    """In-memory stand-in for a backend conversation.

    Each repository is an ``AsyncMock``; tests script its return values
    and assert on the awaited calls. ``committed`` records whether the
    service reached ``commit``.
    """

    def __init__(self) -> None:
        self.groups = AsyncMock()
        self.memberships = AsyncMock()
        self.posts = AsyncMock()
        self.reactions = AsyncMock()
        self.committed = False
        self.rolled_back = False
        self.opened = 0

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        self.opened += 1
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            self.rolled_back = True


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """The signed-in rider."""
    return uuid4()


@pytest.fixture
def other_user_id() -> UUID:
    """Somebody else: a group creator or post owner that is not the rider."""
    return uuid4()


@pytest.fixture
def signed_in(user_id: UUID) -> UserSession:
    return UserSession(CurrentUser(id=user_id, email="rider@example.com", display_name="Rider"))


@pytest.fixture
def anonymous() -> UserSession:
    return UserSession()
