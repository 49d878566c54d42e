"""Pydantic schemas for Supabase table rows.

The hosted schema uses Spanish column names; field aliases map them to
the domain vocabulary.
"""

from datetime import datetime, timezone
from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from domain.entities.group import ContactInfo, Group, Membership, RosterMember
from domain.entities.post import Comment, Like, Post
from domain.entities.profile import Profile


def _naive_utc(value: datetime) -> datetime:
    """Domain timestamps are naive UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]


class Row(BaseModel):
    """Base for table rows: populated by column name, extra columns ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProfileRow(Row):
    """``usuarios`` row (or the embedded summary of one)."""

    id: UUID
    email: str | None = None
    display_name: str | None = Field(None, alias="nombre")
    avatar_url: str | None = None
    city: str | None = Field(None, alias="ciudad")
    created_at: UtcDatetime = Field(default_factory=datetime.utcnow)

    def to_entity(self) -> Profile:
        return Profile(
            id=self.id,
            email=self.email or "",
            display_name=self.display_name,
            avatar_url=self.avatar_url,
            city=self.city,
            created_at=self.created_at,
            updated_at=self.created_at,
        )


class ContactRow(Row):
    """``contacto`` JSON column of a group."""

    email: str | None = Field(None, alias="correo")
    instagram: str | None = None
    phone: str | None = Field(None, alias="telefono")

    @classmethod
    def from_entity(cls, contact: ContactInfo) -> dict[str, str]:
        pruned = contact.pruned()
        row = cls(email=pruned.email, instagram=pruned.instagram, phone=pruned.phone)
        return row.model_dump(by_alias=True, exclude_none=True)


class GroupRow(Row):
    """``parches`` row."""

    id: UUID
    name: str = Field(alias="nombre")
    description: str | None = Field(None, alias="descripcion")
    city: str | None = Field(None, alias="ciudad")
    disciplines: list[str] | None = Field(None, alias="disciplinas")
    photo: str | None = Field(None, alias="foto")
    photos: list[str] | None = Field(None, alias="fotos")
    approx_members: int | None = Field(None, alias="miembros_aprox")
    contact: ContactRow | None = Field(None, alias="contacto")
    created_by: UUID
    creator: ProfileRow | None = Field(None, alias="usuario_creador")
    created_at: UtcDatetime = Field(default_factory=datetime.utcnow)
    updated_at: UtcDatetime | None = None

    def to_entity(self) -> Group:
        contact = self.contact or ContactRow()
        return Group(
            id=self.id,
            name=self.name,
            creator_id=self.created_by,
            description=self.description or "",
            city=self.city or "",
            disciplines=self.disciplines or [],
            photo=self.photo or "",
            photos=list(self.photos or []),
            approx_members=self.approx_members or 1,
            contact=ContactInfo(
                email=contact.email,
                instagram=contact.instagram,
                phone=contact.phone,
            ),
            creator=self.creator.to_entity() if self.creator else None,
            created_at=self.created_at,
            updated_at=self.updated_at or self.created_at,
        )

    @staticmethod
    def values(fields: dict[str, Any]) -> dict[str, Any]:
        """Column values for a dict of domain field changes."""
        values: dict[str, Any] = {}
        for key, value in fields.items():
            if key == "contact":
                value = ContactRow.from_entity(value)
            column = GroupRow.model_fields[key].alias or key
            values[column] = value
        return values

    @classmethod
    def from_entity(cls, group: Group) -> dict[str, Any]:
        """Insert payload for a new group."""
        values = cls.values(
            {
                "name": group.name,
                "description": group.description,
                "city": group.city,
                "disciplines": list(group.disciplines),
                "photo": group.photo,
                "photos": list(group.photos),
                "approx_members": group.approx_members,
                "contact": group.contact,
            }
        )
        values["id"] = str(group.id)
        values["created_by"] = str(group.creator_id)
        return values


class MembershipRow(Row):
    """``parches_seguidores`` row."""

    group_id: UUID = Field(alias="parche_id")
    user_id: UUID = Field(alias="usuario_id")
    joined_at: UtcDatetime = Field(default_factory=datetime.utcnow, alias="created_at")
    user: ProfileRow | None = Field(None, alias="usuario")

    def to_entity(self) -> Membership:
        return Membership(group_id=self.group_id, user_id=self.user_id, joined_at=self.joined_at)

    def to_roster_member(self) -> RosterMember:
        return RosterMember(
            group_id=self.group_id,
            user_id=self.user_id,
            joined_at=self.joined_at,
            profile=self.user.to_entity() if self.user else None,
        )


class PostRow(Row):
    """``galeria`` row."""

    id: UUID
    owner_id: UUID = Field(alias="usuario_id")
    image_url: str = Field(alias="imagen")
    caption: str | None = Field(None, alias="descripcion")
    location: str | None = Field(None, alias="ubicacion")
    aspect_ratio: float | None = None
    owner: ProfileRow | None = Field(None, alias="usuario")
    created_at: UtcDatetime = Field(default_factory=datetime.utcnow)
    updated_at: UtcDatetime | None = None

    def to_entity(self) -> Post:
        return Post(
            id=self.id,
            owner_id=self.owner_id,
            image_url=self.image_url,
            caption=self.caption,
            location=self.location,
            aspect_ratio=self.aspect_ratio or 1.0,
            owner=self.owner.to_entity() if self.owner else None,
            created_at=self.created_at,
            updated_at=self.updated_at or self.created_at,
        )

    @staticmethod
    def values(fields: dict[str, Any]) -> dict[str, Any]:
        return {PostRow.model_fields[key].alias or key: value for key, value in fields.items()}

    @classmethod
    def from_entity(cls, post: Post) -> dict[str, Any]:
        values = cls.values(
            {
                "image_url": post.image_url,
                "caption": post.caption,
                "location": post.location,
                "aspect_ratio": post.aspect_ratio,
            }
        )
        values["id"] = str(post.id)
        values["usuario_id"] = str(post.owner_id)
        return values


class LikeRow(Row):
    """``galeria_likes`` row."""

    post_id: UUID = Field(alias="galeria_id")
    user_id: UUID = Field(alias="usuario_id")
    created_at: UtcDatetime = Field(default_factory=datetime.utcnow)
    user: ProfileRow | None = Field(None, alias="usuario")

    def to_entity(self) -> Like:
        return Like(
            post_id=self.post_id,
            user_id=self.user_id,
            created_at=self.created_at,
            user=self.user.to_entity() if self.user else None,
        )


class CommentRow(Row):
    """``galeria_comentarios`` row."""

    id: UUID
    post_id: UUID = Field(alias="galeria_id")
    author_id: UUID = Field(alias="usuario_id")
    text: str = Field(alias="texto")
    author: ProfileRow | None = Field(None, alias="usuario")
    created_at: UtcDatetime = Field(default_factory=datetime.utcnow)

    def to_entity(self) -> Comment:
        return Comment(
            id=self.id,
            post_id=self.post_id,
            author_id=self.author_id,
            text=self.text,
            author=self.author.to_entity() if self.author else None,
            created_at=self.created_at,
        )
