"""Gallery post domain entities."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from domain.entities.media import DEFAULT_ASPECT_RATIO, LocalImage
from domain.entities.profile import Profile


@dataclass
class Post:
    """Domain entity for a shared photo."""

    owner_id: UUID
    image_url: str
    id: UUID = field(default_factory=uuid4)
    caption: str | None = None
    location: str | None = None
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    like_count: int = 0
    comment_count: int = 0
    liked_by_me: bool = False
    owner: Profile | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if not self.aspect_ratio or self.aspect_ratio <= 0:
            self.aspect_ratio = DEFAULT_ASPECT_RATIO
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class PostDraft:
    """Form data for a new post."""

    image: LocalImage | None
    caption: str = ""
    location: str = ""


@dataclass
class PostPatch:
    """Partial update of a post."""

    caption: str | None = None
    location: str | None = None

    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class PostFilters:
    """Feed query options."""

    owner_id: UUID | None = None
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class PostStats:
    """Aggregate numbers over the gallery."""

    total_posts: int = 0


@dataclass
class Like:
    """A user liking a post."""

    post_id: UUID
    user_id: UUID
    created_at: datetime = field(default_factory=datetime.utcnow)
    user: Profile | None = None


@dataclass
class Comment:
    """A comment on a post."""

    post_id: UUID
    author_id: UUID
    text: str
    id: UUID = field(default_factory=uuid4)
    author: Profile | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class LikeToggle:
    """State of a like after toggling it."""

    liked: bool
    like_count: int
