"""SQLAlchemy implementation of Membership repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.group import Membership, RosterMember
from infrastructure.database.mappers import profile_to_entity
from infrastructure.database.models import MembershipModel
from infrastructure.database.statements import insert_ignoring_duplicates


class SQLAlchemyMembershipRepository:
    """SQLAlchemy implementation of IMembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, group_id: UUID, user_id: UUID) -> Membership | None:
        """Get a specific membership."""
        model = await self._session.get(MembershipModel, (group_id, user_id))
        return self._to_entity(model) if model else None

    async def add(self, membership: Membership) -> Membership | None:
        """Insert a membership. Returns None if the pair already exists."""
        inserted = await insert_ignoring_duplicates(
            self._session,
            MembershipModel,
            {
                "group_id": membership.group_id,
                "user_id": membership.user_id,
                "joined_at": membership.joined_at,
            },
        )
        return membership if inserted else None

    async def remove(self, group_id: UUID, user_id: UUID) -> bool:
        """Delete a membership."""
        model = await self._session.get(MembershipModel, (group_id, user_id))
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def list_for_group(self, group_id: UUID) -> list[RosterMember]:
        """Get the roster of a group, newest first."""
        stmt = (
            select(MembershipModel)
            .where(MembershipModel.group_id == group_id)
            .order_by(MembershipModel.joined_at.desc())
        )
        result = await self._session.execute(stmt)
        return [
            RosterMember(
                group_id=model.group_id,
                user_id=model.user_id,
                joined_at=model.joined_at,
                profile=profile_to_entity(model.user),
            )
            for model in result.scalars()
        ]

    async def count_batch(self, group_ids: list[UUID]) -> dict[UUID, int]:
        """Member counts for multiple groups in a single query."""
        if not group_ids:
            return {}

        stmt = (
            select(MembershipModel.group_id, func.count())
            .where(MembershipModel.group_id.in_(group_ids))
            .group_by(MembershipModel.group_id)
        )
        result = await self._session.execute(stmt)
        return {group_id: count for group_id, count in result.all()}

    def _to_entity(self, model: MembershipModel) -> Membership:
        """Convert ORM model to domain entity."""
        return Membership(
            group_id=model.group_id,
            user_id=model.user_id,
            joined_at=model.joined_at,
        )
