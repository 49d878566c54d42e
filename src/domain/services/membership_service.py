"""Membership (join/leave) service layer."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import CreatorCannotJoinError, GroupNotFoundError
from domain.entities.group import Membership, MembershipChange, RosterMember
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class MembershipService:
    """Service layer for following and leaving groups.

    Joining twice and leaving a group you are not in are both reported as
    successful no-ops (``MembershipChange.changed`` is False). The store's
    unique constraint on (group, user) settles concurrent joins.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def add_member(self, group_id: UUID, user_id: UUID) -> MembershipChange:
        """Join a group."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if group is None:
                raise GroupNotFoundError(str(group_id))
            if group.creator_id == user_id:
                raise CreatorCannotJoinError(str(group_id))

            existing = await uow.memberships.get(group_id, user_id)
            if existing is not None:
                return MembershipChange(changed=False, membership=existing)

            added = await uow.memberships.add(
                Membership(group_id=group_id, user_id=user_id)
            )
            if added is None:
                # Lost a race with a concurrent join of the same user
                return MembershipChange(
                    changed=False,
                    membership=await uow.memberships.get(group_id, user_id),
                )

            await uow.commit()

        logger.info("group_joined", group_id=str(group_id), user_id=str(user_id))
        return MembershipChange(changed=True, membership=added)

    async def remove_member(self, group_id: UUID, user_id: UUID) -> MembershipChange:
        """Leave a group."""
        async with self._uow_factory() as uow:
            existing = await uow.memberships.get(group_id, user_id)
            if existing is None:
                return MembershipChange(changed=False)

            removed = await uow.memberships.remove(group_id, user_id)
            await uow.commit()

        if removed:
            logger.info("group_left", group_id=str(group_id), user_id=str(user_id))
        return MembershipChange(changed=removed, membership=existing)

    async def list_members(self, group_id: UUID) -> list[RosterMember]:
        """Roster of a group, newest member first."""
        async with self._uow_factory() as uow:
            return await uow.memberships.list_for_group(group_id)

    async def is_member(self, group_id: UUID, user_id: UUID) -> bool:
        async with self._uow_factory() as uow:
            return await uow.memberships.get(group_id, user_id) is not None
