"""Group ("parche") domain entities."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from domain.entities.profile import Profile


class Discipline(str, Enum):
    """Skating disciplines a group can practice."""

    STREET = "street"
    PARK = "park"
    FREESTYLE = "freestyle"
    SPEED = "speed"
    DOWNHILL = "downhill"
    CRUISING = "cruising"
    SLALOM = "slalom"


DISCIPLINE_VALUES = frozenset(d.value for d in Discipline)


class MembershipStatus(str, Enum):
    """How the current user relates to a group."""

    ANONYMOUS = "anonymous"
    CREATOR = "creator"
    MEMBER = "member"
    NOT_MEMBER = "not_member"


def normalize_disciplines(values: Any) -> list[str]:
    """Disciplines are a set; keep them unique and sorted."""
    if not values:
        return []
    return sorted({str(getattr(v, "value", v)).strip() for v in values if v})


@dataclass
class ContactInfo:
    """Optional contact block of a group."""

    email: str | None = None
    instagram: str | None = None
    phone: str | None = None

    def pruned(self) -> "ContactInfo":
        """Copy with blank fields dropped and the rest trimmed."""
        return ContactInfo(
            **{
                f.name: (getattr(self, f.name) or "").strip() or None
                for f in fields(self)
            }
        )

    def as_dict(self) -> dict[str, str]:
        """Non-empty fields only."""
        pruned = self.pruned()
        return {
            f.name: getattr(pruned, f.name)
            for f in fields(pruned)
            if getattr(pruned, f.name)
        }

    def is_empty(self) -> bool:
        return not self.as_dict()


@dataclass
class Group:
    """Domain entity for a skating crew."""

    name: str
    creator_id: UUID
    id: UUID = field(default_factory=uuid4)
    description: str = ""
    city: str = ""
    disciplines: list[str] = field(default_factory=list)
    photo: str = ""
    photos: list[str] = field(default_factory=list)
    approx_members: int = 1
    member_count: int = 0
    contact: ContactInfo = field(default_factory=ContactInfo)
    creator: Profile | None = None
    members: list["RosterMember"] | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.disciplines = normalize_disciplines(self.disciplines)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def display_member_count(self) -> int:
        """Roster size when a roster exists, the approximate count otherwise."""
        if self.member_count:
            return self.member_count
        return self.approx_members


@dataclass
class GroupDraft:
    """Form data for creating a group."""

    name: str
    description: str = ""
    city: str = ""
    disciplines: list[str] = field(default_factory=list)
    photo: str = ""
    approx_members: int = 1
    contact: ContactInfo = field(default_factory=ContactInfo)


@dataclass
class GroupPatch:
    """Partial update of a group. ``None`` means "leave unchanged"."""

    name: str | None = None
    description: str | None = None
    city: str | None = None
    disciplines: list[str] | None = None
    photo: str | None = None
    approx_members: int | None = None
    contact: ContactInfo | None = None

    def changes(self) -> dict[str, Any]:
        """Fields that were actually set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class GroupFilters:
    """Active filter set of the group list."""

    text: str = ""
    city: str = ""
    discipline: str = ""
    creator_id: UUID | None = None

    def is_empty(self) -> bool:
        return not (self.text.strip() or self.city or self.discipline or self.creator_id)


@dataclass(frozen=True)
class GroupStats:
    """Aggregate numbers over all groups."""

    total: int = 0
    cities: int = 0
    disciplines: int = 0
    approx_members_total: int = 0
    approx_members_avg: int = 0


@dataclass
class Membership:
    """A user following/belonging to a group."""

    group_id: UUID
    user_id: UUID
    joined_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class RosterMember:
    """Membership joined with the member's profile."""

    group_id: UUID
    user_id: UUID
    joined_at: datetime = field(default_factory=datetime.utcnow)
    profile: Profile | None = None

    @property
    def display_name(self) -> str:
        return self.profile.label if self.profile else ""


@dataclass(frozen=True)
class MembershipChange:
    """Result of a join/leave. ``changed`` is False for no-ops."""

    changed: bool
    membership: Membership | None = None


def membership_status(
    group: Group,
    user_id: UUID | None,
    roster: list[RosterMember] | None = None,
) -> MembershipStatus:
    """Creator and member are mutually exclusive; creator wins."""
    if user_id is None:
        return MembershipStatus.ANONYMOUS
    if group.creator_id == user_id:
        return MembershipStatus.CREATOR
    members = roster if roster is not None else (group.members or [])
    if any(m.user_id == user_id for m in members):
        return MembershipStatus.MEMBER
    return MembershipStatus.NOT_MEMBER
