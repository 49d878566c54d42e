"""Shared ORM to domain conversions."""

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


def profile_to_entity(model: ProfileModel | None) -> Profile | None:
    """Convert a joined profile row, if any, to a domain entity."""
    if model is None:
        return None
    return Profile(
        id=model.id,
        email=model.email,
        display_name=model.display_name,
        avatar_url=model.avatar_url,
        city=model.city,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
