"""Likes and comments service layer."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import CommentNotFoundError, PostNotFoundError, ValidationFailedError
from domain.entities.post import Comment, Like, LikeToggle
from domain.repositories.unit_of_work import IUnitOfWork
from domain.validation import validate_comment

logger = structlog.get_logger()


class ReactionService:
    """Service layer for likes and comments on posts."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def toggle_like(self, post_id: UUID, user_id: UUID) -> LikeToggle:
        """Like the post, or unlike it when already liked.

        Returns the state read back from the store after the change.
        """
        async with self._uow_factory() as uow:
            post = await uow.posts.get(post_id)
            if post is None:
                raise PostNotFoundError(str(post_id))

            existing = await uow.reactions.get_like(post_id, user_id)
            if existing is not None:
                await uow.reactions.remove_like(post_id, user_id)
            else:
                # None means a concurrent toggle already inserted the like
                await uow.reactions.add_like(Like(post_id=post_id, user_id=user_id))

            await uow.commit()

            liked = await uow.reactions.get_like(post_id, user_id) is not None
            counts = await uow.reactions.count_likes_batch([post_id])
            return LikeToggle(liked=liked, like_count=counts.get(post_id, 0))

    async def is_liked(self, post_id: UUID, user_id: UUID) -> bool:
        async with self._uow_factory() as uow:
            return await uow.reactions.get_like(post_id, user_id) is not None

    async def list_likes(self, post_id: UUID) -> list[Like]:
        """Likes of a post with the users who gave them, newest first."""
        async with self._uow_factory() as uow:
            return await uow.reactions.list_likes(post_id)

    async def count_likes(self, post_id: UUID) -> int:
        async with self._uow_factory() as uow:
            counts = await uow.reactions.count_likes_batch([post_id])
            return counts.get(post_id, 0)

    async def add_comment(self, post_id: UUID, author_id: UUID, text: str) -> Comment:
        """Comment on a post."""
        result = validate_comment(text)
        if not result.is_valid:
            raise ValidationFailedError(result.errors)

        async with self._uow_factory() as uow:
            post = await uow.posts.get(post_id)
            if post is None:
                raise PostNotFoundError(str(post_id))

            created = await uow.reactions.add_comment(
                Comment(post_id=post_id, author_id=author_id, text=text.strip())
            )
            await uow.commit()

        logger.info("comment_added", post_id=str(post_id), comment_id=str(created.id))
        return created

    async def list_comments(self, post_id: UUID) -> list[Comment]:
        """Comments of a post, oldest first."""
        async with self._uow_factory() as uow:
            return await uow.reactions.list_comments(post_id)

    async def remove_comment(self, comment_id: UUID, author_id: UUID) -> bool:
        """Delete a comment. Only its author may do so."""
        async with self._uow_factory() as uow:
            deleted = await uow.reactions.delete_comment(comment_id, author_id)
            if not deleted:
                raise CommentNotFoundError(str(comment_id))
            await uow.commit()
            return True
