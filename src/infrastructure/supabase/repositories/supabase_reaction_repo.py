"""Supabase implementation of the likes and comments repository."""

from collections import Counter
from uuid import UUID

from domain.entities.post import Comment, Like
from infrastructure.supabase.client import SupabaseClient, eq, in_
from infrastructure.supabase.schemas import CommentRow, LikeRow

LIKES_TABLE = "galeria_likes"
COMMENTS_TABLE = "galeria_comentarios"
LIKE_COLUMNS = "*,usuario:usuarios!galeria_likes_usuario_id_fkey(id,nombre,avatar_url)"
COMMENT_COLUMNS = "*,usuario:usuarios!galeria_comentarios_usuario_id_fkey(id,nombre,avatar_url)"


class SupabaseReactionRepository:
    """Supabase implementation of IReactionRepository."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    # --- Likes ---

    async def get_like(self, post_id: UUID, user_id: UUID) -> Like | None:
        rows = await self._client.select(
            LIKES_TABLE, [eq("galeria_id", post_id), eq("usuario_id", user_id)]
        )
        return LikeRow.model_validate(rows[0]).to_entity() if rows else None

    async def add_like(self, like: Like) -> Like | None:
        """Insert a like. Returns None if the pair already exists."""
        rows = await self._client.insert(
            LIKES_TABLE,
            [{"galeria_id": str(like.post_id), "usuario_id": str(like.user_id)}],
            ignore_duplicates=True,
        )
        return LikeRow.model_validate(rows[0]).to_entity() if rows else None

    async def remove_like(self, post_id: UUID, user_id: UUID) -> bool:
        rows = await self._client.delete(
            LIKES_TABLE, [eq("galeria_id", post_id), eq("usuario_id", user_id)]
        )
        return bool(rows)

    async def list_likes(self, post_id: UUID) -> list[Like]:
        """Likes of a post with the liking users, newest first."""
        rows = await self._client.select(
            LIKES_TABLE,
            [eq("galeria_id", post_id)],
            columns=LIKE_COLUMNS,
            order="created_at.desc",
        )
        return [LikeRow.model_validate(row).to_entity() for row in rows]

    async def count_likes_batch(self, post_ids: list[UUID]) -> dict[UUID, int]:
        return await self._count_by_post(LIKES_TABLE, post_ids)

    async def liked_post_ids(self, user_id: UUID, post_ids: list[UUID]) -> set[UUID]:
        if not post_ids:
            return set()

        rows = await self._client.select(
            LIKES_TABLE,
            [eq("usuario_id", user_id), in_("galeria_id", post_ids)],
            columns="galeria_id",
        )
        return {UUID(str(row["galeria_id"])) for row in rows}

    # --- Comments ---

    async def add_comment(self, comment: Comment) -> Comment:
        rows = await self._client.insert(
            COMMENTS_TABLE,
            [
                {
                    "id": str(comment.id),
                    "galeria_id": str(comment.post_id),
                    "usuario_id": str(comment.author_id),
                    "texto": comment.text,
                }
            ],
            columns=COMMENT_COLUMNS,
        )
        return CommentRow.model_validate(rows[0]).to_entity()

    async def get_comment(self, comment_id: UUID) -> Comment | None:
        rows = await self._client.select(
            COMMENTS_TABLE, [eq("id", comment_id)], columns=COMMENT_COLUMNS
        )
        return CommentRow.model_validate(rows[0]).to_entity() if rows else None

    async def list_comments(self, post_id: UUID) -> list[Comment]:
        """Comments of a post, oldest first."""
        rows = await self._client.select(
            COMMENTS_TABLE,
            [eq("galeria_id", post_id)],
            columns=COMMENT_COLUMNS,
            order="created_at.asc",
        )
        return [CommentRow.model_validate(row).to_entity() for row in rows]

    async def delete_comment(self, comment_id: UUID, author_id: UUID) -> bool:
        """Delete a comment written by ``author_id``."""
        rows = await self._client.delete(
            COMMENTS_TABLE, [eq("id", comment_id), eq("usuario_id", author_id)]
        )
        return bool(rows)

    async def count_comments_batch(self, post_ids: list[UUID]) -> dict[UUID, int]:
        return await self._count_by_post(COMMENTS_TABLE, post_ids)

    async def _count_by_post(self, table: str, post_ids: list[UUID]) -> dict[UUID, int]:
        if not post_ids:
            return {}

        rows = await self._client.select(
            table, [in_("galeria_id", post_ids)], columns="galeria_id"
        )
        return dict(Counter(UUID(str(row["galeria_id"])) for row in rows))
