"""Group repository protocol."""

from __future__ import annotations

from typing import Any, Literal, Protocol
from uuid import UUID

from domain.entities.group import Group, GroupFilters

DistinctField = Literal["city", "disciplines"]


class IGroupRepository(Protocol):
    """Repository interface for Group entities."""

    async def list(self, filters: GroupFilters) -> list[Group]:
        """Get groups matching the filters, newest first."""
        ...

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        ...

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        ...

    async def update(
        self, id: UUID, changes: dict[str, Any], owner_id: UUID
    ) -> Group | None:
        """Apply field changes to a group owned by ``owner_id``.

        Returns None when no such group belongs to that owner.
        """
        ...

    async def delete(self, id: UUID, owner_id: UUID) -> bool:
        """Delete a group owned by ``owner_id`` (cascade deletes members)."""
        ...

    async def distinct_values(self, field: DistinctField) -> list[str]:
        """Unique non-empty values of a field across all groups."""
        ...
