"""Collection state manager for gallery posts."""

from dataclasses import replace
from uuid import UUID

from core.exceptions import PostNotFoundError, ValidationFailedError
from domain.entities.post import (
    Comment,
    Like,
    LikeToggle,
    Post,
    PostDraft,
    PostFilters,
    PostPatch,
    PostStats,
)
from domain.services.post_service import PostService
from domain.services.reaction_service import ReactionService
from domain.validation import (
    IMAGE_REQUIRED,
    validate_caption,
    validate_comment,
    validate_image_format,
)
from state.collection import CollectionState
from state.results import OperationResult
from state.session import UserSession


def validate_post(draft: PostDraft) -> list[str]:
    """Required-field checks of a new post: an image in a known format."""
    errors: list[str] = []
    if draft.image is None:
        errors.append(IMAGE_REQUIRED)
    else:
        errors += validate_image_format(draft.image.uri).errors
    errors += validate_caption(draft.caption).errors
    return errors


class PostCollection(CollectionState[Post]):
    """The gallery feed with likes and comments."""

    def __init__(
        self,
        posts: PostService,
        reactions: ReactionService,
        session: UserSession,
    ) -> None:
        super().__init__(session)
        self._posts = posts
        self._reactions = reactions
        self.active_filters = PostFilters()

    # --- Reads ---

    async def load(self, filters: PostFilters | None = None) -> OperationResult[list[Post]]:
        if filters is not None:
            self.active_filters = filters
        current = self.active_filters
        return await self._fetch(
            "load_posts", lambda: self._posts.list(current, self._session.user_id)
        )

    async def refresh(self) -> OperationResult[list[Post]]:
        current = self.active_filters
        return await self._fetch(
            "refresh_posts",
            lambda: self._posts.list(current, self._session.user_id),
            flag="refreshing",
        )

    async def load_one(self, post_id: UUID) -> OperationResult[Post]:
        async def action() -> Post:
            post = await self._posts.get(post_id, self._session.user_id)
            if post is None:
                raise PostNotFoundError(str(post_id))
            return post

        return await self._run("load_post", action)

    async def load_mine(self) -> OperationResult[list[Post]]:
        """Posts of the current user. Does not replace ``items``."""

        async def action() -> list[Post]:
            user = self._require_user()
            return await self._posts.list(PostFilters(owner_id=user.id), user.id)

        return await self._run("load_my_posts", action)

    async def load_stats(self) -> OperationResult[PostStats]:
        return await self._run("load_post_stats", self._posts.stats)

    # --- Mutations ---

    async def create(self, draft: PostDraft) -> OperationResult[Post]:
        """Upload the image and publish the post."""

        async def action() -> Post:
            user = self._require_user()
            errors = validate_post(draft)
            if errors:
                raise ValidationFailedError(errors)
            return await self._posts.create(draft, user.id)

        return await self._mutate("create_post", action, self.load)

    async def update(self, post_id: UUID, patch: PostPatch) -> OperationResult[Post]:
        async def action() -> Post:
            user = self._require_user()
            result = validate_caption(patch.caption)
            if not result.is_valid:
                raise ValidationFailedError(result.errors)
            return await self._posts.update(post_id, patch, user.id)

        return await self._mutate("update_post", action, self.load)

    async def remove(self, post_id: UUID) -> OperationResult[bool]:
        async def action() -> bool:
            user = self._require_user()
            return await self._posts.remove(post_id, user.id)

        return await self._mutate("remove_post", action, self.load)

    # --- Likes ---

    async def toggle_like(self, post_id: UUID) -> OperationResult[LikeToggle]:
        """Like or unlike a post and patch that single item in ``items``."""

        async def action() -> LikeToggle:
            user = self._require_user()
            toggle = await self._reactions.toggle_like(post_id, user.id)
            self._patch_item(post_id, liked_by_me=toggle.liked, like_count=toggle.like_count)
            return toggle

        return await self._run("toggle_like", action)

    async def is_liked(self, post_id: UUID) -> OperationResult[bool]:
        async def action() -> bool:
            user = self._require_user()
            return await self._reactions.is_liked(post_id, user.id)

        return await self._run("is_liked", action)

    async def like_count(self, post_id: UUID) -> OperationResult[int]:
        return await self._run("count_likes", lambda: self._reactions.count_likes(post_id))

    async def list_likes(self, post_id: UUID) -> OperationResult[list[Like]]:
        return await self._run("list_likes", lambda: self._reactions.list_likes(post_id))

    # --- Comments ---

    async def add_comment(self, post_id: UUID, text: str) -> OperationResult[Comment]:
        async def action() -> Comment:
            user = self._require_user()
            result = validate_comment(text)
            if not result.is_valid:
                raise ValidationFailedError(result.errors)
            return await self._reactions.add_comment(post_id, user.id, text)

        return await self._run("add_comment", action)

    async def list_comments(self, post_id: UUID) -> OperationResult[list[Comment]]:
        return await self._run("list_comments", lambda: self._reactions.list_comments(post_id))

    async def remove_comment(self, comment_id: UUID) -> OperationResult[bool]:
        async def action() -> bool:
            user = self._require_user()
            return await self._reactions.remove_comment(comment_id, user.id)

        return await self._run("remove_comment", action)

    # --- Derived queries ---

    def can_edit(self, post: Post) -> bool:
        user = self.current_user
        return user is not None and post.owner_id == user.id

    def _patch_item(self, post_id: UUID, **changes: object) -> None:
        if self.is_detached:
            return
        self.items = [
            replace(post, **changes) if post.id == post_id else post for post in self.items
        ]
