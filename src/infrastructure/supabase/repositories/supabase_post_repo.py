"""Supabase implementation of Post repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from domain.entities.post import Post, PostFilters
from infrastructure.supabase.client import Params, SupabaseClient, eq
from infrastructure.supabase.schemas import PostRow

TABLE = "galeria"
COLUMNS = "*,usuario:usuarios!galeria_usuario_id_fkey(id,nombre,avatar_url,ciudad)"


class SupabasePostRepository:
    """Supabase implementation of IPostRepository."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def list(self, filters: PostFilters) -> list[Post]:
        """Get posts, newest first."""
        params: Params = []
        if filters.owner_id:
            params.append(eq("usuario_id", filters.owner_id))

        rows = await self._client.select(
            TABLE,
            params,
            columns=COLUMNS,
            order="created_at.desc",
            limit=filters.limit,
            offset=filters.offset,
        )
        return [PostRow.model_validate(row).to_entity() for row in rows]

    async def get(self, id: UUID) -> Post | None:
        """Get a post by ID."""
        rows = await self._client.select(TABLE, [eq("id", id)], columns=COLUMNS)
        return PostRow.model_validate(rows[0]).to_entity() if rows else None

    async def create(self, post: Post) -> Post:
        """Create a new post."""
        rows = await self._client.insert(TABLE, [PostRow.from_entity(post)], columns=COLUMNS)
        return PostRow.model_validate(rows[0]).to_entity()

    async def update(
        self, id: UUID, changes: dict[str, Any], owner_id: UUID
    ) -> Post | None:
        """Apply changes to a post owned by ``owner_id``."""
        values = PostRow.values(changes)
        values["updated_at"] = datetime.utcnow().isoformat()
        rows = await self._client.update(
            TABLE,
            values,
            [eq("id", id), eq("usuario_id", owner_id)],
            columns=COLUMNS,
        )
        return PostRow.model_validate(rows[0]).to_entity() if rows else None

    async def delete(self, id: UUID, owner_id: UUID) -> bool:
        """Delete a post owned by ``owner_id`` (likes and comments cascade)."""
        rows = await self._client.delete(TABLE, [eq("id", id), eq("usuario_id", owner_id)])
        return bool(rows)

    async def count(self) -> int:
        rows = await self._client.select(TABLE, columns="id")
        return len(rows)
