"""Paginated, searchable view over a group's roster."""

from dataclasses import dataclass
from uuid import UUID

import structlog

from core.exceptions import AppException, ServiceError
from domain.entities.group import RosterMember
from domain.services.membership_service import MembershipService
from state.results import OperationResult
from state.session import UserSession

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class RosterEntry:
    """A visible roster row."""

    member: RosterMember
    is_current_user: bool

    @property
    def display_name(self) -> str:
        return self.member.display_name


class RosterView:
    """Fetches the whole roster once, then pages and searches it locally.

    ``load_more`` never grows ``visible_count`` past the filtered length.
    """

    def __init__(
        self,
        memberships: MembershipService,
        session: UserSession,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._memberships = memberships
        self._session = session
        self.page_size = page_size
        self.full_list: list[RosterMember] = []
        self.query = ""
        self.visible_count = page_size
        self.loading = False
        self.loaded = False
        self.error: str | None = None
        self._generation = 0
        self._loading_owner = 0

    async def load(self, group_id: UUID) -> OperationResult[list[RosterMember]]:
        """Fetch the roster, newest member first, and reset search and paging."""
        self._generation += 1
        generation = self._generation
        self._loading_owner = generation
        self.loading = True
        try:
            members = await self._memberships.list_members(group_id)
        except Exception as exc:
            error = exc if isinstance(exc, AppException) else ServiceError(str(exc))
            if not isinstance(exc, AppException):
                logger.exception("roster_load_crashed", group_id=str(group_id))
            if generation == self._generation:
                self.error = error.message
            return OperationResult.fail(error)
        finally:
            if self._loading_owner == generation:
                self.loading = False

        if generation != self._generation:
            return OperationResult.ok(members)

        self.full_list = list(members)
        self.query = ""
        self.visible_count = self.page_size
        self.loaded = True
        self.error = None
        return OperationResult.ok(self.full_list)

    def detach(self) -> None:
        self._generation += 1

    def set_query(self, text: str) -> None:
        """Filter by display name (case-insensitive) and go back to page one."""
        self.query = text
        self.visible_count = self.page_size

    def load_more(self) -> bool:
        """Reveal another page. Returns False when everything is visible."""
        total = len(self.filtered)
        if self.visible_count >= total:
            return False
        self.visible_count = min(self.visible_count + self.page_size, total)
        return True

    @property
    def filtered(self) -> list[RosterMember]:
        needle = self.query.strip().lower()
        if not needle:
            return self.full_list
        return [m for m in self.full_list if needle in m.display_name.lower()]

    @property
    def visible(self) -> list[RosterEntry]:
        user_id = self._session.user_id
        return [
            RosterEntry(member=m, is_current_user=user_id is not None and m.user_id == user_id)
            for m in self.filtered[: self.visible_count]
        ]

    @property
    def is_empty(self) -> bool:
        """Loaded, and the group has no members at all."""
        return self.loaded and not self.full_list

    @property
    def is_search_empty(self) -> bool:
        """There are members, but none match the query."""
        return bool(self.full_list) and not self.filtered

    @property
    def has_more(self) -> bool:
        return self.visible_count < len(self.filtered)
