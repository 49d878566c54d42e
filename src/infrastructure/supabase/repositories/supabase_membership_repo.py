"""Supabase implementation of Membership repository."""

from collections import Counter
from uuid import UUID

from domain.entities.group import Membership, RosterMember
from infrastructure.supabase.client import SupabaseClient, eq, in_
from infrastructure.supabase.schemas import MembershipRow

TABLE = "parches_seguidores"
ROSTER_COLUMNS = "*,usuario:usuarios!parches_seguidores_usuario_id_fkey(id,nombre,avatar_url,ciudad)"


class SupabaseMembershipRepository:
    """Supabase implementation of IMembershipRepository."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def get(self, group_id: UUID, user_id: UUID) -> Membership | None:
        """Get a specific membership."""
        rows = await self._client.select(
            TABLE, [eq("parche_id", group_id), eq("usuario_id", user_id)]
        )
        return MembershipRow.model_validate(rows[0]).to_entity() if rows else None

    async def add(self, membership: Membership) -> Membership | None:
        """Insert a membership. Returns None if the pair already exists."""
        rows = await self._client.insert(
            TABLE,
            [{"parche_id": str(membership.group_id), "usuario_id": str(membership.user_id)}],
            ignore_duplicates=True,
        )
        return MembershipRow.model_validate(rows[0]).to_entity() if rows else None

    async def remove(self, group_id: UUID, user_id: UUID) -> bool:
        """Delete a membership."""
        rows = await self._client.delete(
            TABLE, [eq("parche_id", group_id), eq("usuario_id", user_id)]
        )
        return bool(rows)

    async def list_for_group(self, group_id: UUID) -> list[RosterMember]:
        """Get the roster of a group, newest first."""
        rows = await self._client.select(
            TABLE,
            [eq("parche_id", group_id)],
            columns=ROSTER_COLUMNS,
            order="created_at.desc",
        )
        return [MembershipRow.model_validate(row).to_roster_member() for row in rows]

    async def count_batch(self, group_ids: list[UUID]) -> dict[UUID, int]:
        """Member counts for multiple groups in a single request."""
        if not group_ids:
            return {}

        rows = await self._client.select(
            TABLE, [in_("parche_id", group_ids)], columns="parche_id"
        )
        counts = Counter(UUID(str(row["parche_id"])) for row in rows)
        return dict(counts)
