"""Like and comment repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.post import Comment, Like


class IReactionRepository(Protocol):
    """Repository interface for likes and comments on posts."""

    async def get_like(self, post_id: UUID, user_id: UUID) -> Like | None:
        """Get the like of a user on a post."""
        ...

    async def add_like(self, like: Like) -> Like | None:
        """Insert a like. Returns None if the pair already exists."""
        ...

    async def remove_like(self, post_id: UUID, user_id: UUID) -> bool:
        """Delete a like."""
        ...

    async def list_likes(self, post_id: UUID) -> list[Like]:
        """Likes of a post with the liking users, newest first."""
        ...

    async def count_likes_batch(self, post_ids: list[UUID]) -> dict[UUID, int]:
        """Like counts for multiple posts."""
        ...

    async def liked_post_ids(self, user_id: UUID, post_ids: list[UUID]) -> set[UUID]:
        """Subset of ``post_ids`` the user has liked."""
        ...

    async def add_comment(self, comment: Comment) -> Comment:
        """Insert a comment."""
        ...

    async def get_comment(self, comment_id: UUID) -> Comment | None:
        """Get a comment by ID."""
        ...

    async def list_comments(self, post_id: UUID) -> list[Comment]:
        """Comments of a post, oldest first."""
        ...

    async def delete_comment(self, comment_id: UUID, author_id: UUID) -> bool:
        """Delete a comment written by ``author_id``."""
        ...

    async def count_comments_batch(self, post_ids: list[UUID]) -> dict[UUID, int]:
        """Comment counts for multiple posts."""
        ...
