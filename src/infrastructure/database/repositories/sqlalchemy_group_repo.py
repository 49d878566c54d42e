"""SQLAlchemy implementation of Group repository."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import distinct, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.group import ContactInfo, Group, GroupFilters
from domain.repositories.group_repository import DistinctField
from infrastructure.database.mappers import profile_to_entity
from infrastructure.database.models import GroupDisciplineModel, GroupModel

_PLAIN_FIELDS = ("name", "description", "city", "photo", "photos", "approx_members")


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list(self, filters: GroupFilters) -> list[Group]:
        """Get groups matching the filters, newest first."""
        stmt = select(GroupModel).order_by(GroupModel.created_at.desc())

        if filters.city:
            stmt = stmt.where(GroupModel.city == filters.city)
        if filters.discipline:
            stmt = stmt.where(
                GroupModel.id.in_(
                    select(GroupDisciplineModel.group_id).where(
                        GroupDisciplineModel.discipline == filters.discipline
                    )
                )
            )
        if filters.creator_id:
            stmt = stmt.where(GroupModel.created_by == filters.creator_id)

        text = filters.text.strip()
        if text:
            pattern = f"%{text}%"
            stmt = stmt.where(
                or_(
                    GroupModel.name.ilike(pattern),
                    GroupModel.description.ilike(pattern),
                    GroupModel.city.ilike(pattern),
                )
            )

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        model = await self._session.get(GroupModel, id)
        return self._to_entity(model) if model else None

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        model = self._to_model(group)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model, ["creator", "discipline_rows"])
        return self._to_entity(model)

    async def update(
        self, id: UUID, changes: dict[str, Any], owner_id: UUID
    ) -> Group | None:
        """Apply changes to a group owned by ``owner_id``."""
        stmt = select(GroupModel).where(
            GroupModel.id == id,
            GroupModel.created_by == owner_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        for key in _PLAIN_FIELDS:
            if key in changes:
                setattr(model, key, changes[key])
        if "contact" in changes:
            model.contact = changes["contact"].as_dict()
        if "disciplines" in changes:
            wanted = set(changes["disciplines"])
            kept = [r for r in model.discipline_rows if r.discipline in wanted]
            current = {r.discipline for r in kept}
            model.discipline_rows = kept + [
                GroupDisciplineModel(discipline=d) for d in sorted(wanted - current)
            ]

        await self._session.flush()
        await self._session.refresh(model, ["updated_at", "discipline_rows"])
        return self._to_entity(model)

    async def delete(self, id: UUID, owner_id: UUID) -> bool:
        """Delete a group owned by ``owner_id`` (cascade deletes members)."""
        stmt = select(GroupModel).where(
            GroupModel.id == id,
            GroupModel.created_by == owner_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def distinct_values(self, field: DistinctField) -> list[str]:
        """Unique non-empty cities or disciplines."""
        if field == "disciplines":
            stmt = select(distinct(GroupDisciplineModel.discipline))
        else:
            stmt = select(distinct(GroupModel.city)).where(GroupModel.city != "")
        result = await self._session.execute(stmt)
        return sorted(value for value in result.scalars() if value)

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert ORM model to domain entity."""
        return Group(
            id=model.id,
            name=model.name,
            creator_id=model.created_by,
            description=model.description or "",
            city=model.city or "",
            disciplines=[row.discipline for row in model.discipline_rows],
            photo=model.photo or "",
            photos=list(model.photos or []),
            approx_members=model.approx_members,
            contact=ContactInfo(**(model.contact or {})),
            creator=profile_to_entity(model.creator),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Group) -> GroupModel:
        """Convert domain entity to ORM model."""
        return GroupModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            city=entity.city,
            photo=entity.photo,
            photos=list(entity.photos),
            approx_members=entity.approx_members,
            contact=entity.contact.as_dict(),
            created_by=entity.creator_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            discipline_rows=[GroupDisciplineModel(discipline=d) for d in entity.disciplines],
        )
