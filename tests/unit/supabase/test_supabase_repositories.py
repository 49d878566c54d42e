"""Tests for the Supabase repositories: query shape and row mapping."""

from datetime import datetime
from uuid import uuid4

import pytest

from domain.entities.group import ContactInfo, Group, GroupFilters, Membership
from domain.entities.post import Comment, Like, Post, PostFilters
from infrastructure.supabase.client import SupabaseClient
from infrastructure.supabase.repositories.supabase_group_repo import SupabaseGroupRepository
from infrastructure.supabase.repositories.supabase_membership_repo import (
    SupabaseMembershipRepository,
)
from infrastructure.supabase.repositories.supabase_post_repo import SupabasePostRepository
from infrastructure.supabase.repositories.supabase_reaction_repo import (
    SupabaseReactionRepository,
)
from tests.unit.supabase.conftest import RecordingTransport

CREATOR_ID = uuid4()
GROUP_ID = uuid4()


def group_row(**overrides) -> dict:
    row = {
        "id": str(GROUP_ID),
        "nombre": "Rodadores Cali",
        "descripcion": "Night rides",
        "ciudad": "Cali",
        "disciplinas": ["street", "park"],
        "foto": None,
        "fotos": None,
        "miembros_aprox": 12,
        "contacto": {"correo": "crew@example.com", "telefono": "300"},
        "created_by": str(CREATOR_ID),
        "created_at": "2024-06-01T10:00:00+00:00",
        "updated_at": None,
        "usuario_creador": {"id": str(CREATOR_ID), "nombre": "Ana", "email": "ana@example.com"},
    }
    row.update(overrides)
    return row


class TestGroupRepository:
    @pytest.mark.asyncio
    async def test_list_maps_rows(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([group_row()])

        groups = await SupabaseGroupRepository(client).list(GroupFilters())

        group = groups[0]
        assert group.id == GROUP_ID
        assert group.name == "Rodadores Cali"
        assert group.disciplines == ["park", "street"]
        assert group.contact == ContactInfo(email="crew@example.com", phone="300")
        assert group.creator.display_name == "Ana"
        assert group.created_at == datetime(2024, 6, 1, 10, 0)
        assert group.photos == []
        assert transport.last.url.params["order"] == "created_at.desc"

    @pytest.mark.asyncio
    async def test_list_filters(self, client: SupabaseClient, transport: RecordingTransport):
        await SupabaseGroupRepository(client).list(
            GroupFilters(text=" night ", city="Cali", discipline="park")
        )

        params = transport.last.url.params
        assert params["ciudad"] == "eq.Cali"
        assert params["disciplinas"] == "cs.{park}"
        assert params["or"] == (
            '(nombre.ilike."*night*",descripcion.ilike."*night*",ciudad.ilike."*night*")'
        )

    @pytest.mark.asyncio
    async def test_get_missing(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([])

        assert await SupabaseGroupRepository(client).get(uuid4()) is None

    @pytest.mark.asyncio
    async def test_create_payload(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([group_row()], status_code=201)
        group = Group(
            id=GROUP_ID,
            name="Rodadores Cali",
            creator_id=CREATOR_ID,
            city="Cali",
            contact=ContactInfo(email="crew@example.com", instagram=" "),
        )

        await SupabaseGroupRepository(client).create(group)

        payload = transport.last_json()[0]
        assert payload["nombre"] == "Rodadores Cali"
        assert payload["ciudad"] == "Cali"
        assert payload["created_by"] == str(CREATOR_ID)
        assert payload["contacto"] == {"correo": "crew@example.com"}

    @pytest.mark.asyncio
    async def test_update_is_scoped_to_creator(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([])

        result = await SupabaseGroupRepository(client).update(
            GROUP_ID, {"name": "Renamed"}, uuid4()
        )

        assert result is None
        params = transport.last.url.params
        assert params["id"] == f"eq.{GROUP_ID}"
        assert params["created_by"].startswith("eq.")
        body = transport.last_json()
        assert body["nombre"] == "Renamed"
        assert "updated_at" in body

    @pytest.mark.asyncio
    async def test_delete(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([group_row()])

        assert await SupabaseGroupRepository(client).delete(GROUP_ID, CREATOR_ID) is True

    @pytest.mark.asyncio
    async def test_distinct_disciplines(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([{"disciplinas": ["park"]}, {"disciplinas": None}, {"disciplinas": ["street", "park"]}])

        values = await SupabaseGroupRepository(client).distinct_values("disciplines")

        assert values == ["park", "street"]


class TestMembershipRepository:
    @pytest.mark.asyncio
    async def test_add_duplicate_returns_none(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([], status_code=201)

        result = await SupabaseMembershipRepository(client).add(
            Membership(group_id=GROUP_ID, user_id=uuid4())
        )

        assert result is None
        assert "resolution=ignore-duplicates" in transport.last.headers["Prefer"]

    @pytest.mark.asyncio
    async def test_roster(self, client: SupabaseClient, transport: RecordingTransport):
        user_id = uuid4()
        transport.queue(
            [
                {
                    "parche_id": str(GROUP_ID),
                    "usuario_id": str(user_id),
                    "created_at": "2024-06-02T08:00:00Z",
                    "usuario": {"id": str(user_id), "nombre": "Juan", "ciudad": "Cali"},
                }
            ]
        )

        roster = await SupabaseMembershipRepository(client).list_for_group(GROUP_ID)

        assert roster[0].user_id == user_id
        assert roster[0].display_name == "Juan"
        assert roster[0].joined_at == datetime(2024, 6, 2, 8, 0)

    @pytest.mark.asyncio
    async def test_count_batch(self, client: SupabaseClient, transport: RecordingTransport):
        other = uuid4()
        transport.queue(
            [{"parche_id": str(GROUP_ID)}, {"parche_id": str(GROUP_ID)}, {"parche_id": str(other)}]
        )

        counts = await SupabaseMembershipRepository(client).count_batch([GROUP_ID, other])

        assert counts == {GROUP_ID: 2, other: 1}
        assert transport.last.url.params["parche_id"] == f"in.({GROUP_ID},{other})"

    @pytest.mark.asyncio
    async def test_count_batch_empty_skips_request(
        self, client: SupabaseClient, transport: RecordingTransport
    ):
        assert await SupabaseMembershipRepository(client).count_batch([]) == {}
        assert transport.requests == []


class TestPostRepository:
    @pytest.mark.asyncio
    async def test_list_paging(self, client: SupabaseClient, transport: RecordingTransport):
        owner = uuid4()
        transport.queue(
            [
                {
                    "id": str(uuid4()),
                    "usuario_id": str(owner),
                    "imagen": "https://cdn/p.jpg",
                    "descripcion": "Bowl session",
                    "ubicacion": None,
                    "aspect_ratio": None,
                    "created_at": "2024-06-01T10:00:00Z",
                }
            ]
        )

        posts = await SupabasePostRepository(client).list(PostFilters(owner_id=owner, limit=20, offset=40))

        assert posts[0].caption == "Bowl session"
        assert posts[0].aspect_ratio == 1.0
        params = transport.last.url.params
        assert params["usuario_id"] == f"eq.{owner}"
        assert params["limit"] == "20"
        assert params["offset"] == "40"

    @pytest.mark.asyncio
    async def test_count(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([{"id": str(uuid4())}, {"id": str(uuid4())}])

        assert await SupabasePostRepository(client).count() == 2
        assert transport.last.url.path.endswith("/galeria")
        assert transport.last.url.params["select"] == "id"

    @pytest.mark.asyncio
    async def test_create_payload(self, client: SupabaseClient, transport: RecordingTransport):
        post = Post(owner_id=uuid4(), image_url="https://cdn/p.jpg", caption="Hi", aspect_ratio=0.8)
        transport.queue(
            [
                {
                    "id": str(post.id),
                    "usuario_id": str(post.owner_id),
                    "imagen": post.image_url,
                    "descripcion": "Hi",
                    "aspect_ratio": 0.8,
                    "created_at": "2024-06-01T10:00:00Z",
                }
            ],
            status_code=201,
        )

        created = await SupabasePostRepository(client).create(post)

        assert created.id == post.id
        payload = transport.last_json()[0]
        assert payload["imagen"] == "https://cdn/p.jpg"
        assert payload["descripcion"] == "Hi"
        assert payload["usuario_id"] == str(post.owner_id)


class TestReactionRepository:
    @pytest.mark.asyncio
    async def test_add_like(self, client: SupabaseClient, transport: RecordingTransport):
        post_id, user_id = uuid4(), uuid4()
        transport.queue(
            [{"galeria_id": str(post_id), "usuario_id": str(user_id), "created_at": "2024-06-01T10:00:00Z"}],
            status_code=201,
        )

        like = await SupabaseReactionRepository(client).add_like(Like(post_id=post_id, user_id=user_id))

        assert like is not None
        assert like.post_id == post_id

    @pytest.mark.asyncio
    async def test_liked_post_ids(self, client: SupabaseClient, transport: RecordingTransport):
        liked = uuid4()
        transport.queue([{"galeria_id": str(liked)}])

        result = await SupabaseReactionRepository(client).liked_post_ids(uuid4(), [liked, uuid4()])

        assert result == {liked}

    @pytest.mark.asyncio
    async def test_comments_oldest_first(self, client: SupabaseClient, transport: RecordingTransport):
        await SupabaseReactionRepository(client).list_comments(uuid4())

        assert transport.last.url.params["order"] == "created_at.asc"

    @pytest.mark.asyncio
    async def test_add_comment(self, client: SupabaseClient, transport: RecordingTransport):
        comment = Comment(post_id=uuid4(), author_id=uuid4(), text="Nice")
        transport.queue(
            [
                {
                    "id": str(comment.id),
                    "galeria_id": str(comment.post_id),
                    "usuario_id": str(comment.author_id),
                    "texto": "Nice",
                    "created_at": "2024-06-01T10:00:00Z",
                    "usuario": {"id": str(comment.author_id), "nombre": "Ana"},
                }
            ],
            status_code=201,
        )

        created = await SupabaseReactionRepository(client).add_comment(comment)

        assert created.text == "Nice"
        assert created.author.display_name == "Ana"
        assert transport.last_json()[0]["texto"] == "Nice"

    @pytest.mark.asyncio
    async def test_delete_foreign_comment(self, client: SupabaseClient, transport: RecordingTransport):
        transport.queue([])

        assert await SupabaseReactionRepository(client).delete_comment(uuid4(), uuid4()) is False
