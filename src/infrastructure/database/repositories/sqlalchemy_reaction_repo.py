"""SQLAlchemy implementation of the likes and comments repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.post import Comment, Like
from infrastructure.database.mappers import profile_to_entity
from infrastructure.database.models import CommentModel, LikeModel
from infrastructure.database.statements import insert_ignoring_duplicates


class SQLAlchemyReactionRepository:
    """SQLAlchemy implementation of IReactionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Likes ---

    async def get_like(self, post_id: UUID, user_id: UUID) -> Like | None:
        """Get the like of a user on a post."""
        model = await self._session.get(LikeModel, (post_id, user_id))
        return self._like_to_entity(model) if model else None

    async def add_like(self, like: Like) -> Like | None:
        """Insert a like. Returns None if the pair already exists."""
        inserted = await insert_ignoring_duplicates(
            self._session,
            LikeModel,
            {
                "post_id": like.post_id,
                "user_id": like.user_id,
                "created_at": like.created_at,
            },
        )
        return like if inserted else None

    async def remove_like(self, post_id: UUID, user_id: UUID) -> bool:
        """Delete a like."""
        model = await self._session.get(LikeModel, (post_id, user_id))
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list_likes(self, post_id: UUID) -> list[Like]:
        """Likes of a post, newest first."""
        stmt = (
            select(LikeModel)
            .where(LikeModel.post_id == post_id)
            .order_by(LikeModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._like_to_entity(model) for model in result.scalars()]

    async def count_likes_batch(self, post_ids: list[UUID]) -> dict[UUID, int]:
        """Like counts for multiple posts in a single query."""
        if not post_ids:
            return {}

        stmt = (
            select(LikeModel.post_id, func.count())
            .where(LikeModel.post_id.in_(post_ids))
            .group_by(LikeModel.post_id)
        )
        result = await self._session.execute(stmt)
        return {post_id: count for post_id, count in result.all()}

    async def liked_post_ids(self, user_id: UUID, post_ids: list[UUID]) -> set[UUID]:
        """Subset of ``post_ids`` the user has liked."""
        if not post_ids:
            return set()

        stmt = select(LikeModel.post_id).where(
            LikeModel.user_id == user_id,
            LikeModel.post_id.in_(post_ids),
        )
        result = await self._session.execute(stmt)
        return set(result.scalars())

    # --- Comments ---

    async def add_comment(self, comment: Comment) -> Comment:
        """Insert a comment."""
        model = CommentModel(
            id=comment.id,
            post_id=comment.post_id,
            author_id=comment.author_id,
            text=comment.text,
            created_at=comment.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model, ["author"])
        return self._comment_to_entity(model)

    async def get_comment(self, comment_id: UUID) -> Comment | None:
        """Get a comment by ID."""
        model = await self._session.get(CommentModel, comment_id)
        return self._comment_to_entity(model) if model else None

    async def list_comments(self, post_id: UUID) -> list[Comment]:
        """Comments of a post, oldest first."""
        stmt = (
            select(CommentModel)
            .where(CommentModel.post_id == post_id)
            .order_by(CommentModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._comment_to_entity(model) for model in result.scalars()]

    async def delete_comment(self, comment_id: UUID, author_id: UUID) -> bool:
        """Delete a comment written by ``author_id``."""
        model = await self._session.get(CommentModel, comment_id)
        if not model or model.author_id != author_id:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def count_comments_batch(self, post_ids: list[UUID]) -> dict[UUID, int]:
        """Comment counts for multiple posts in a single query."""
        if not post_ids:
            return {}

        stmt = (
            select(CommentModel.post_id, func.count())
            .where(CommentModel.post_id.in_(post_ids))
            .group_by(CommentModel.post_id)
        )
        result = await self._session.execute(stmt)
        return {post_id: count for post_id, count in result.all()}

    def _like_to_entity(self, model: LikeModel) -> Like:
        """Convert like ORM model to domain entity."""
        return Like(
            post_id=model.post_id,
            user_id=model.user_id,
            created_at=model.created_at,
            user=profile_to_entity(model.user),
        )

    def _comment_to_entity(self, model: CommentModel) -> Comment:
        """Convert comment ORM model to domain entity."""
        return Comment(
            id=model.id,
            post_id=model.post_id,
            author_id=model.author_id,
            text=model.text,
            author=profile_to_entity(model.author),
            created_at=model.created_at,
        )
