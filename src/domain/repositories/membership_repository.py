"""Membership repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.group import Membership, RosterMember


class IMembershipRepository(Protocol):
    """Repository interface for group memberships."""

    async def get(self, group_id: UUID, user_id: UUID) -> Membership | None:
        """Get a specific membership."""
        ...

    async def add(self, membership: Membership) -> Membership | None:
        """Insert a membership. Returns None if the pair already exists."""
        ...

    async def remove(self, group_id: UUID, user_id: UUID) -> bool:
        """Delete a membership. Returns False if there was none."""
        ...

    async def list_for_group(self, group_id: UUID) -> list[RosterMember]:
        """Get the roster of a group, newest first."""
        ...

    async def count_batch(self, group_ids: list[UUID]) -> dict[UUID, int]:
        """Member counts for multiple groups in a single query."""
        ...
