"""SQLAlchemy implementation of Post repository."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.post import Post, PostFilters
from infrastructure.database.mappers import profile_to_entity
from infrastructure.database.models import PostModel

_EDITABLE_FIELDS = ("caption", "location")


class SQLAlchemyPostRepository:
    """SQLAlchemy implementation of IPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list(self, filters: PostFilters) -> list[Post]:
        """Get posts, newest first."""
        stmt = select(PostModel).order_by(PostModel.created_at.desc())
        if filters.owner_id:
            stmt = stmt.where(PostModel.owner_id == filters.owner_id)
        if filters.offset:
            stmt = stmt.offset(filters.offset)
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get(self, id: UUID) -> Post | None:
        """Get a post by ID."""
        model = await self._session.get(PostModel, id)
        return self._to_entity(model) if model else None

    async def create(self, post: Post) -> Post:
        """Create a new post."""
        model = self._to_model(post)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model, ["owner"])
        return self._to_entity(model)

    async def update(
        self, id: UUID, changes: dict[str, Any], owner_id: UUID
    ) -> Post | None:
        """Apply changes to a post owned by ``owner_id``."""
        stmt = select(PostModel).where(PostModel.id == id, PostModel.owner_id == owner_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        for key in _EDITABLE_FIELDS:
            if key in changes:
                setattr(model, key, changes[key])

        await self._session.flush()
        await self._session.refresh(model, ["updated_at"])
        return self._to_entity(model)

    async def delete(self, id: UUID, owner_id: UUID) -> bool:
        """Delete a post owned by ``owner_id`` (cascade deletes likes and comments)."""
        stmt = select(PostModel).where(PostModel.id == id, PostModel.owner_id == owner_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(PostModel))
        return result.scalar_one()

    def _to_entity(self, model: PostModel) -> Post:
        """Convert ORM model to domain entity."""
        return Post(
            id=model.id,
            owner_id=model.owner_id,
            image_url=model.image_url,
            caption=model.caption,
            location=model.location,
            aspect_ratio=model.aspect_ratio,
            owner=profile_to_entity(model.owner),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Post) -> PostModel:
        """Convert domain entity to ORM model."""
        return PostModel(
            id=entity.id,
            owner_id=entity.owner_id,
            image_url=entity.image_url,
            caption=entity.caption,
            location=entity.location,
            aspect_ratio=entity.aspect_ratio,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
