"""Supabase Unit of Work implementation."""

from typing import Any, Optional

from infrastructure.supabase.client import SupabaseClient
from infrastructure.supabase.repositories.supabase_group_repo import SupabaseGroupRepository
from infrastructure.supabase.repositories.supabase_membership_repo import SupabaseMembershipRepository
from infrastructure.supabase.repositories.supabase_post_repo import SupabasePostRepository
from infrastructure.supabase.repositories.supabase_reaction_repo import SupabaseReactionRepository


class SupabaseUnitOfWork:
    """Unit of Work over the Supabase REST API.

    Every PostgREST request is its own transaction, so ``commit`` and
    ``rollback`` have nothing to do. Multi-row consistency (cascades,
    uniqueness) is left to the database constraints.
    """

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client
        self.groups = SupabaseGroupRepository(client)
        self.memberships = SupabaseMembershipRepository(client)
        self.posts = SupabasePostRepository(client)
        self.reactions = SupabaseReactionRepository(client)

    async def commit(self) -> None:
        """Commit the current transaction."""

    async def rollback(self) -> None:
        """Rollback the current transaction."""

    async def __aenter__(self) -> "SupabaseUnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        return None
