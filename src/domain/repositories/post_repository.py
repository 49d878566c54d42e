"""Post repository protocol."""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from domain.entities.post import Post, PostFilters


class IPostRepository(Protocol):
    """Repository interface for gallery posts."""

    async def list(self, filters: PostFilters) -> list[Post]:
        """Get posts, newest first."""
        ...

    async def get(self, id: UUID) -> Post | None:
        """Get a post by ID."""
        ...

    async def create(self, post: Post) -> Post:
        """Create a new post."""
        ...

    async def update(
        self, id: UUID, changes: dict[str, Any], owner_id: UUID
    ) -> Post | None:
        """Apply field changes to a post owned by ``owner_id``."""
        ...

    async def delete(self, id: UUID, owner_id: UUID) -> bool:
        """Delete a post owned by ``owner_id`` (cascade deletes likes and comments)."""
        ...

    async def count(self) -> int:
        """Number of posts in the gallery."""
        ...
