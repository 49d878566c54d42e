"""Unit of Work protocol shared by the SQL and Supabase bindings."""

from typing import Any, Protocol

from domain.repositories.group_repository import IGroupRepository
from domain.repositories.membership_repository import IMembershipRepository
from domain.repositories.post_repository import IPostRepository
from domain.repositories.reaction_repository import IReactionRepository


class IUnitOfWork(Protocol):
    """One backend conversation.

    Services open it with ``async with`` per call and ``commit`` after
    writes. Backends without transactions treat ``commit`` as a no-op.
    """

    groups: IGroupRepository
    memberships: IMembershipRepository
    posts: IPostRepository
    reactions: IReactionRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
