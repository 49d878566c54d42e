"""Gallery post service layer."""

from __future__ import annotations

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import ForbiddenError, PostNotFoundError, ServiceError, ValidationFailedError
from domain.entities.media import LocalImage, UploadResult
from domain.entities.post import Post, PostDraft, PostFilters, PostPatch, PostStats
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.media_service import MediaService, post_image_path
from domain.validation import IMAGE_REQUIRED

logger = structlog.get_logger()


class PostService:
    """Service layer for photo posts."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        media: MediaService | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._media = media

    async def list(
        self, filters: PostFilters | None = None, viewer_id: UUID | None = None
    ) -> list[Post]:
        """Get posts, newest first, with like and comment counts."""
        filters = filters or PostFilters()
        async with self._uow_factory() as uow:
            posts = await uow.posts.list(filters)
            await self._attach_reactions(uow, posts, viewer_id)
            return posts

    async def get(self, post_id: UUID, viewer_id: UUID | None = None) -> Post | None:
        async with self._uow_factory() as uow:
            post = await uow.posts.get(post_id)
            if post is None:
                return None
            await self._attach_reactions(uow, [post], viewer_id)
            return post

    async def upload_image(self, image: LocalImage, owner_id: UUID) -> UploadResult:
        """Upload a post image into the owner's folder."""
        if self._media is None:
            return UploadResult(success=False, error="Image uploads are not configured")
        return await self._media.upload_image(image, post_image_path(owner_id))

    async def create(self, draft: PostDraft, owner_id: UUID) -> Post:
        """Upload the draft's image and publish the post."""
        if draft.image is None:
            raise ValidationFailedError([IMAGE_REQUIRED])

        upload = await self.upload_image(draft.image, owner_id)
        if not upload.success:
            raise ServiceError(upload.error or "Could not upload the image")

        post = Post(
            owner_id=owner_id,
            image_url=upload.url,
            caption=(draft.caption or "").strip() or None,
            location=(draft.location or "").strip() or None,
            aspect_ratio=upload.aspect_ratio,
        )

        async with self._uow_factory() as uow:
            created = await uow.posts.create(post)
            await uow.commit()

        logger.info("post_created", post_id=str(created.id), owner_id=str(owner_id))
        return created

    async def update(self, post_id: UUID, patch: PostPatch, requester_id: UUID) -> Post:
        """Edit caption or location. Only the owner may do so."""
        changes = {
            key: (value.strip() or None) for key, value in patch.changes().items()
        }
        async with self._uow_factory() as uow:
            existing = await uow.posts.get(post_id)
            if existing is None:
                raise PostNotFoundError(str(post_id))

            updated = await uow.posts.update(post_id, changes, requester_id)
            if updated is None:
                raise ForbiddenError("Only the owner can edit this post")

            await uow.commit()
            return updated

    async def remove(self, post_id: UUID, requester_id: UUID) -> bool:
        """Delete a post with its likes and comments. Only the owner may do so."""
        async with self._uow_factory() as uow:
            existing = await uow.posts.get(post_id)
            if existing is None:
                raise PostNotFoundError(str(post_id))

            deleted = await uow.posts.delete(post_id, requester_id)
            if not deleted:
                raise ForbiddenError("Only the owner can delete this post")

            await uow.commit()

        logger.info("post_deleted", post_id=str(post_id))
        return True

    async def stats(self) -> PostStats:
        async with self._uow_factory() as uow:
            return PostStats(total_posts=await uow.posts.count())

    # --- Internal helpers ---

    async def _attach_reactions(
        self, uow: IUnitOfWork, posts: list[Post], viewer_id: UUID | None
    ) -> None:
        if not posts:
            return
        post_ids = [p.id for p in posts]
        likes = await uow.reactions.count_likes_batch(post_ids)
        comments = await uow.reactions.count_comments_batch(post_ids)
        liked: set[UUID] = set()
        if viewer_id is not None:
            liked = await uow.reactions.liked_post_ids(viewer_id, post_ids)

        for post in posts:
            post.like_count = likes.get(post.id, 0)
            post.comment_count = comments.get(post.id, 0)
            post.liked_by_me = post.id in liked
