"""Collection state manager for groups."""

from uuid import UUID

from core.exceptions import GroupNotFoundError, ValidationFailedError
from domain.entities.group import (
    Group,
    GroupDraft,
    GroupFilters,
    GroupPatch,
    GroupStats,
    MembershipChange,
    MembershipStatus,
    RosterMember,
    membership_status,
)
from domain.entities.media import LocalImage
from domain.services.group_service import GroupService
from domain.services.membership_service import MembershipService
from domain.validation import validate_group, validate_group_patch
from state.collection import CollectionState
from state.results import OperationResult
from state.session import UserSession


class GroupCollection(CollectionState[Group]):
    """The group list with its filters, CRUD and join/leave.

    Every successful create, update, remove or ``add_photos`` reloads the
    list with the active filters; nothing is inserted locally. Join and
    leave do not touch the list, the detail view refetches the group.
    """

    def __init__(
        self,
        groups: GroupService,
        memberships: MembershipService,
        session: UserSession,
    ) -> None:
        super().__init__(session)
        self._groups = groups
        self._memberships = memberships
        self.active_filters = GroupFilters()

    # --- Reads ---

    async def load(self, filters: GroupFilters | None = None) -> OperationResult[list[Group]]:
        """Replace ``items`` with the groups matching ``filters``.

        Without arguments the last-used filters are applied again.
        """
        if filters is not None:
            self.active_filters = filters
        current = self.active_filters
        return await self._fetch("load_groups", lambda: self._groups.list(current))

    async def refresh(self) -> OperationResult[list[Group]]:
        """Reload with the active filters, flagged as ``refreshing``."""
        current = self.active_filters
        return await self._fetch(
            "refresh_groups", lambda: self._groups.list(current), flag="refreshing"
        )

    async def load_one(self, group_id: UUID) -> OperationResult[Group]:
        """Fetch a single group with its roster. ``items`` is left alone."""

        async def action() -> Group:
            group = await self._groups.get(group_id)
            if group is None:
                raise GroupNotFoundError(str(group_id))
            return group

        return await self._run("load_group", action)

    async def apply_filters(self, filters: GroupFilters) -> OperationResult[list[Group]]:
        return await self.load(filters)

    async def clear_filters(self) -> OperationResult[list[Group]]:
        return await self.load(GroupFilters())

    async def list_cities(self) -> OperationResult[list[str]]:
        return await self._run("list_cities", lambda: self._groups.distinct_values("city"))

    async def list_disciplines(self) -> OperationResult[list[str]]:
        return await self._run(
            "list_disciplines", lambda: self._groups.distinct_values("disciplines")
        )

    async def load_stats(self) -> OperationResult[GroupStats]:
        return await self._run("load_group_stats", self._groups.stats)

    # --- Mutations ---

    async def create(self, draft: GroupDraft) -> OperationResult[Group]:
        async def action() -> Group:
            user = self._require_user()
            result = validate_group(draft)
            if not result.is_valid:
                raise ValidationFailedError(result.errors)
            return await self._groups.create(draft, user.id)

        return await self._mutate("create_group", action, self.load)

    async def update(self, group_id: UUID, patch: GroupPatch) -> OperationResult[Group]:
        """Edit a group. The backend rejects requesters that are not the creator."""

        async def action() -> Group:
            user = self._require_user()
            result = validate_group_patch(patch)
            if not result.is_valid:
                raise ValidationFailedError(result.errors)
            return await self._groups.update(group_id, patch, user.id)

        return await self._mutate("update_group", action, self.load)

    async def remove(self, group_id: UUID) -> OperationResult[bool]:
        async def action() -> bool:
            user = self._require_user()
            return await self._groups.remove(group_id, user.id)

        return await self._mutate("remove_group", action, self.load)

    async def add_photos(
        self, group_id: UUID, images: list[LocalImage]
    ) -> OperationResult[Group]:
        """Upload images into the group's gallery."""

        async def action() -> Group:
            user = self._require_user()
            return await self._groups.add_photos(group_id, images, user.id)

        return await self._mutate("add_group_photos", action, self.load)

    # --- Membership ---

    async def join(self, group_id: UUID) -> OperationResult[MembershipChange]:
        async def action() -> MembershipChange:
            user = self._require_user()
            return await self._memberships.add_member(group_id, user.id)

        return await self._run("join_group", action)

    async def leave(self, group_id: UUID) -> OperationResult[MembershipChange]:
        async def action() -> MembershipChange:
            user = self._require_user()
            return await self._memberships.remove_member(group_id, user.id)

        return await self._run("leave_group", action)

    # --- Derived queries ---

    def can_edit(self, group: Group) -> bool:
        """True only for the group's creator."""
        user = self.current_user
        return user is not None and group.creator_id == user.id

    def membership_status(
        self, group: Group, roster: list[RosterMember] | None = None
    ) -> MembershipStatus:
        return membership_status(group, self._session.user_id, roster)
