"""Supabase implementation of Group repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from domain.entities.group import Group, GroupFilters
from domain.repositories.group_repository import DistinctField
from infrastructure.supabase.client import Params, SupabaseClient, eq
from infrastructure.supabase.schemas import GroupRow

TABLE = "parches"
COLUMNS = "*,usuario_creador:usuarios!parches_created_by_fkey(id,nombre,email,avatar_url)"


def _search_term(text: str) -> str:
    # Double quotes delimit the value inside or=(...)
    return '"*' + text.replace('"', "") + '*"'


class SupabaseGroupRepository:
    """Supabase implementation of IGroupRepository."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def list(self, filters: GroupFilters) -> list[Group]:
        """Get groups matching the filters, newest first."""
        params: Params = []
        if filters.city:
            params.append(eq("ciudad", filters.city))
        if filters.discipline:
            params.append(("disciplinas", f"cs.{{{filters.discipline}}}"))
        if filters.creator_id:
            params.append(eq("created_by", filters.creator_id))

        text = filters.text.strip()
        if text:
            term = _search_term(text)
            params.append(
                ("or", f"(nombre.ilike.{term},descripcion.ilike.{term},ciudad.ilike.{term})")
            )

        rows = await self._client.select(TABLE, params, columns=COLUMNS, order="created_at.desc")
        return [GroupRow.model_validate(row).to_entity() for row in rows]

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        rows = await self._client.select(TABLE, [eq("id", id)], columns=COLUMNS)
        return GroupRow.model_validate(rows[0]).to_entity() if rows else None

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        rows = await self._client.insert(TABLE, [GroupRow.from_entity(group)], columns=COLUMNS)
        return GroupRow.model_validate(rows[0]).to_entity()

    async def update(
        self, id: UUID, changes: dict[str, Any], owner_id: UUID
    ) -> Group | None:
        """Apply changes to a group owned by ``owner_id``."""
        values = GroupRow.values(changes)
        values["updated_at"] = datetime.utcnow().isoformat()
        rows = await self._client.update(
            TABLE,
            values,
            [eq("id", id), eq("created_by", owner_id)],
            columns=COLUMNS,
        )
        return GroupRow.model_validate(rows[0]).to_entity() if rows else None

    async def delete(self, id: UUID, owner_id: UUID) -> bool:
        """Delete a group owned by ``owner_id`` (memberships cascade in the database)."""
        rows = await self._client.delete(TABLE, [eq("id", id), eq("created_by", owner_id)])
        return bool(rows)

    async def distinct_values(self, field: DistinctField) -> list[str]:
        """Unique non-empty cities or disciplines."""
        if field == "disciplines":
            rows = await self._client.select(TABLE, columns="disciplinas")
            values = {d for row in rows for d in (row.get("disciplinas") or [])}
        else:
            rows = await self._client.select(TABLE, columns="ciudad")
            values = {row.get("ciudad") for row in rows}
        return sorted(v for v in values if v)
