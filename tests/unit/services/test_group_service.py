"""Unit tests for GroupService."""

from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from core.exceptions import ForbiddenError, GroupNotFoundError, ServiceError
from domain.entities.group import (
    ContactInfo,
    Group,
    GroupDraft,
    GroupFilters,
    GroupPatch,
    RosterMember,
)
from domain.entities.media import LocalImage, UploadResult
from domain.services.group_service import GroupService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def media() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(uow: FakeUnitOfWork, media: AsyncMock) -> GroupService:
    return GroupService(lambda: uow, media)


@pytest.fixture
def group(user_id: UUID) -> Group:
    return Group(name="Patinadores Cali", creator_id=user_id, city="Cali")


# --- list / get ---


class TestList:
    @pytest.mark.asyncio
    async def test_attaches_member_counts(self, service: GroupService, uow: FakeUnitOfWork, user_id: UUID):
        g1 = Group(name="G1", creator_id=user_id)
        g2 = Group(name="G2", creator_id=user_id)
        uow.groups.list.return_value = [g1, g2]
        uow.memberships.count_batch.return_value = {g1.id: 4}

        result = await service.list(GroupFilters(city="Cali"))

        assert [g.member_count for g in result] == [4, 0]
        uow.groups.list.assert_awaited_once_with(GroupFilters(city="Cali"))
        uow.memberships.count_batch.assert_awaited_once_with([g1.id, g2.id])

    @pytest.mark.asyncio
    async def test_defaults_to_empty_filters(self, service: GroupService, uow: FakeUnitOfWork):
        uow.groups.list.return_value = []
        uow.memberships.count_batch.return_value = {}

        assert await service.list() == []
        uow.groups.list.assert_awaited_once_with(GroupFilters())


class TestGet:
    @pytest.mark.asyncio
    async def test_attaches_roster(self, service: GroupService, uow: FakeUnitOfWork, group: Group):
        roster = [RosterMember(group_id=group.id, user_id=uuid4())]
        uow.groups.get.return_value = group
        uow.memberships.list_for_group.return_value = roster

        result = await service.get(group.id)

        assert result is not None
        assert result.members == roster
        assert result.member_count == 1

    @pytest.mark.asyncio
    async def test_missing_returns_none(self, service: GroupService, uow: FakeUnitOfWork):
        uow.groups.get.return_value = None

        assert await service.get(uuid4()) is None
        uow.memberships.list_for_group.assert_not_awaited()


# --- create ---


class TestCreate:
    @pytest.mark.asyncio
    async def test_applies_defaults(self, service: GroupService, uow: FakeUnitOfWork, user_id: UUID):
        uow.groups.create.side_effect = lambda g: g
        draft = GroupDraft(
            name="  Crew  ",
            city=" Cali ",
            disciplines=["street", "park"],
            approx_members=0,
            contact=ContactInfo(email=" crew@example.com ", instagram=" "),
        )

        result = await service.create(draft, user_id)

        assert result.name == "Crew"
        assert result.city == "Cali"
        assert result.creator_id == user_id
        assert result.disciplines == ["park", "street"]
        assert result.approx_members == 1
        assert result.contact.as_dict() == {"email": "crew@example.com"}
        assert uow.committed

    @pytest.mark.asyncio
    async def test_uploads_local_photo(
        self, service: GroupService, uow: FakeUnitOfWork, media: AsyncMock, user_id: UUID
    ):
        uow.groups.create.side_effect = lambda g: g
        media.upload_image.return_value = UploadResult(success=True, url="https://cdn/p.jpg")

        result = await service.create(GroupDraft(name="Crew", photo="file:///tmp/p.jpg"), user_id)

        assert result.photo == "https://cdn/p.jpg"
        image, path = media.upload_image.await_args.args
        assert image == LocalImage(uri="file:///tmp/p.jpg")
        assert path.startswith("parches/crew_")

    @pytest.mark.asyncio
    async def test_failed_photo_upload_creates_without_photo(
        self, service: GroupService, uow: FakeUnitOfWork, media: AsyncMock, user_id: UUID
    ):
        uow.groups.create.side_effect = lambda g: g
        media.upload_image.return_value = UploadResult(success=False, error="boom")

        result = await service.create(GroupDraft(name="Crew", photo="file:///tmp/p.jpg"), user_id)

        assert result.photo == ""
        uow.groups.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_remote_photo_is_kept(
        self, service: GroupService, uow: FakeUnitOfWork, media: AsyncMock, user_id: UUID
    ):
        uow.groups.create.side_effect = lambda g: g

        result = await service.create(GroupDraft(name="Crew", photo="https://cdn/p.jpg"), user_id)

        assert result.photo == "https://cdn/p.jpg"
        media.upload_image.assert_not_awaited()


# --- update / remove ---


class TestUpdate:
    @pytest.mark.asyncio
    async def test_forwards_requester(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group, user_id: UUID
    ):
        uow.groups.get.return_value = group
        uow.groups.update.return_value = group

        await service.update(group.id, GroupPatch(name=" New name ", contact=ContactInfo(phone=" ")), user_id)

        group_id, changes, requester = uow.groups.update.await_args.args
        assert group_id == group.id
        assert requester == user_id
        assert changes["name"] == "New name"
        assert changes["contact"].is_empty()
        assert uow.committed

    @pytest.mark.asyncio
    async def test_not_found(self, service: GroupService, uow: FakeUnitOfWork, user_id: UUID):
        uow.groups.get.return_value = None

        with pytest.raises(GroupNotFoundError):
            await service.update(uuid4(), GroupPatch(name="New"), user_id)

    @pytest.mark.asyncio
    async def test_rejected_for_non_creator(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group, other_user_id: UUID
    ):
        uow.groups.get.return_value = group
        uow.groups.update.return_value = None

        with pytest.raises(ForbiddenError):
            await service.update(group.id, GroupPatch(name="Mine now"), other_user_id)
        assert not uow.committed
        assert uow.rolled_back


class TestRemove:
    @pytest.mark.asyncio
    async def test_success(self, service: GroupService, uow: FakeUnitOfWork, group: Group, user_id: UUID):
        uow.groups.get.return_value = group
        uow.groups.delete.return_value = True

        assert await service.remove(group.id, user_id) is True
        uow.groups.delete.assert_awaited_once_with(group.id, user_id)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_rejected_for_non_creator(
        self, service: GroupService, uow: FakeUnitOfWork, group: Group, other_user_id: UUID
    ):
        uow.groups.get.return_value = group
        uow.groups.delete.return_value = False

        with pytest.raises(ForbiddenError):
            await service.remove(group.id, other_user_id)


# --- queries ---


class TestDistinctValues:
    @pytest.mark.asyncio
    async def test_sorted_unique_non_empty(self, service: GroupService, uow: FakeUnitOfWork):
        uow.groups.distinct_values.return_value = ["Medellín", "", "Cali", "Cali"]

        assert await service.distinct_values("city") == ["Cali", "Medellín"]


class TestStats:
    @pytest.mark.asyncio
    async def test_aggregates(self, service: GroupService, uow: FakeUnitOfWork, user_id: UUID):
        uow.groups.list.return_value = [
            Group(name="A", creator_id=user_id, city="Cali", disciplines=["street"], approx_members=10),
            Group(name="B", creator_id=user_id, city="Cali", disciplines=["park", "street"], approx_members=5),
            Group(name="C", creator_id=user_id, city="", approx_members=1),
        ]
        uow.memberships.count_batch.return_value = {}

        stats = await service.stats()

        assert stats.total == 3
        assert stats.cities == 1
        assert stats.disciplines == 2
        assert stats.approx_members_total == 16
        assert stats.approx_members_avg == 5

    @pytest.mark.asyncio
    async def test_empty(self, service: GroupService, uow: FakeUnitOfWork):
        uow.groups.list.return_value = []
        uow.memberships.count_batch.return_value = {}

        stats = await service.stats()

        assert stats.total == 0
        assert stats.approx_members_avg == 0


class TestAddPhotos:
    @pytest.mark.asyncio
    async def test_skips_failed_uploads(
        self, service: GroupService, uow: FakeUnitOfWork, media: AsyncMock, group: Group, user_id: UUID
    ):
        group.photos = ["https://cdn/old.jpg"]
        uow.groups.get.return_value = group
        uow.groups.update.return_value = group
        media.upload_image.side_effect = [
            UploadResult(success=True, url="https://cdn/1.jpg"),
            UploadResult(success=False, error="timeout"),
        ]

        await service.add_photos(group.id, [LocalImage("file:///1.jpg"), LocalImage("file:///2.jpg")], user_id)

        _, changes, _ = uow.groups.update.await_args.args
        assert changes == {"photos": ["https://cdn/old.jpg", "https://cdn/1.jpg"]}
        assert uow.opened == 2

    @pytest.mark.asyncio
    async def test_all_failed(
        self, service: GroupService, uow: FakeUnitOfWork, media: AsyncMock, group: Group, user_id: UUID
    ):
        uow.groups.get.return_value = group
        media.upload_image.return_value = UploadResult(success=False, error="timeout")

        with pytest.raises(ServiceError):
            await service.add_photos(group.id, [LocalImage("file:///1.jpg")], user_id)
        uow.groups.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_creator(
        self, service: GroupService, uow: FakeUnitOfWork, media: AsyncMock, group: Group, other_user_id: UUID
    ):
        uow.groups.get.return_value = group

        with pytest.raises(ForbiddenError):
            await service.add_photos(group.id, [LocalImage("file:///1.jpg")], other_user_id)
        media.upload_image.assert_not_awaited()
