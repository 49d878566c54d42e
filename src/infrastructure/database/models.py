"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model (synced from the auth provider)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(100))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    city: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class GroupModel(Base):
    """Skating crew model."""

    __tablename__ = "groups"
    __table_args__ = (
        CheckConstraint("approx_members >= 1", name="ck_groups_approx_members"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="", index=True)
    photo: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    photos: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    approx_members: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    contact: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_by: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    creator: Mapped["ProfileModel"] = relationship("ProfileModel", lazy="selectin")
    discipline_rows: Mapped[list["GroupDisciplineModel"]] = relationship(
        "GroupDisciplineModel",
        back_populates="group",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    members: Mapped[list["MembershipModel"]] = relationship(
        "MembershipModel",
        back_populates="group",
        cascade="all, delete-orphan",
    )


class GroupDisciplineModel(Base):
    """Discipline tag of a group (composite PK on group_id + discipline)."""

    __tablename__ = "group_disciplines"

    group_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    discipline: Mapped[str] = mapped_column(String(20), primary_key=True, index=True)

    group: Mapped["GroupModel"] = relationship("GroupModel", back_populates="discipline_rows")


class MembershipModel(Base):
    """Group membership model (composite PK on group_id + user_id)."""

    __tablename__ = "group_members"

    group_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    group: Mapped["GroupModel"] = relationship("GroupModel", back_populates="members")
    user: Mapped["ProfileModel"] = relationship("ProfileModel", lazy="selectin")


class PostModel(Base):
    """Gallery post model."""

    __tablename__ = "posts"
    __table_args__ = (CheckConstraint("aspect_ratio > 0", name="ck_posts_aspect_ratio"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    owner_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    caption: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(200))
    aspect_ratio: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    owner: Mapped["ProfileModel"] = relationship("ProfileModel", lazy="selectin")
    likes: Mapped[list["LikeModel"]] = relationship(
        "LikeModel",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    comments: Mapped[list["CommentModel"]] = relationship(
        "CommentModel",
        back_populates="post",
        cascade="all, delete-orphan",
    )


class LikeModel(Base):
    """Post like model (composite PK on post_id + user_id)."""

    __tablename__ = "post_likes"

    post_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    post: Mapped["PostModel"] = relationship("PostModel", back_populates="likes")
    user: Mapped["ProfileModel"] = relationship("ProfileModel", lazy="selectin")


class CommentModel(Base):
    """Post comment model."""

    __tablename__ = "post_comments"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    post_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    post: Mapped["PostModel"] = relationship("PostModel", back_populates="comments")
    author: Mapped["ProfileModel"] = relationship("ProfileModel", lazy="selectin")
