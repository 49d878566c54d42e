"""Group service layer with business logic."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import ForbiddenError, GroupNotFoundError, ServiceError
from domain.entities.group import Group, GroupDraft, GroupFilters, GroupPatch, GroupStats
from domain.entities.media import LocalImage, is_local_ref
from domain.repositories.group_repository import DistinctField
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.media_service import (
    MediaService,
    gallery_photo_path,
    group_photo_path,
)

logger = structlog.get_logger()


class GroupService:
    """Service layer for skating crews."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        media: MediaService | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._media = media

    async def list(self, filters: GroupFilters | None = None) -> list[Group]:
        """Get groups matching the filters with their member counts."""
        filters = filters or GroupFilters()
        async with self._uow_factory() as uow:
            groups = await uow.groups.list(filters)
            counts = await uow.memberships.count_batch([g.id for g in groups])
            for group in groups:
                group.member_count = counts.get(group.id, 0)
            return groups

    async def get(self, group_id: UUID) -> Group | None:
        """Get a group with its roster attached, or None."""
        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
            if group is None:
                return None
            group.members = await uow.memberships.list_for_group(group_id)
            group.member_count = len(group.members)
            return group

    async def create(self, draft: GroupDraft, creator_id: UUID) -> Group:
        """Create a group owned by ``creator_id``.

        A photo that still points at a local file is uploaded first. If the
        upload fails the group is created without a photo.
        """
        photo = await self._resolve_photo(draft.photo, draft.name)
        group = Group(
            name=draft.name.strip(),
            creator_id=creator_id,
            description=(draft.description or "").strip(),
            city=(draft.city or "").strip(),
            disciplines=list(draft.disciplines),
            photo=photo,
            approx_members=draft.approx_members or 1,
            contact=draft.contact.pruned(),
        )

        async with self._uow_factory() as uow:
            created = await uow.groups.create(group)
            await uow.commit()

        logger.info("group_created", group_id=str(created.id), creator_id=str(creator_id))
        return created

    async def update(
        self, group_id: UUID, patch: GroupPatch, requester_id: UUID
    ) -> Group:
        """Update a group. Only its creator may do so."""
        changes = self._normalize_changes(patch.changes())
        if "photo" in changes:
            name = patch.name or "parche"
            changes["photo"] = await self._resolve_photo(changes["photo"], name)

        async with self._uow_factory() as uow:
            existing = await uow.groups.get(group_id)
            if existing is None:
                raise GroupNotFoundError(str(group_id))

            updated = await uow.groups.update(group_id, changes, requester_id)
            if updated is None:
                raise ForbiddenError("Only the creator can edit this group")

            await uow.commit()
            return updated

    async def remove(self, group_id: UUID, requester_id: UUID) -> bool:
        """Delete a group and its memberships. Only its creator may do so."""
        async with self._uow_factory() as uow:
            existing = await uow.groups.get(group_id)
            if existing is None:
                raise GroupNotFoundError(str(group_id))

            deleted = await uow.groups.delete(group_id, requester_id)
            if not deleted:
                raise ForbiddenError("Only the creator can delete this group")

            await uow.commit()

        logger.info("group_deleted", group_id=str(group_id))
        return True

    async def distinct_values(self, field: DistinctField) -> list[str]:
        """Sorted unique non-empty values of ``city`` or ``disciplines``."""
        async with self._uow_factory() as uow:
            values = await uow.groups.distinct_values(field)
        return sorted({v for v in values if v})

    async def stats(self) -> GroupStats:
        """Aggregate numbers over every group."""
        groups = await self.list(GroupFilters())
        if not groups:
            return GroupStats()

        total_members = sum(g.approx_members or 0 for g in groups)
        return GroupStats(
            total=len(groups),
            cities=len({g.city for g in groups if g.city}),
            disciplines=len({d for g in groups for d in g.disciplines}),
            approx_members_total=total_members,
            approx_members_avg=round(total_members / len(groups)),
        )

    async def add_photos(
        self, group_id: UUID, images: list[LocalImage], requester_id: UUID
    ) -> Group:
        """Upload images and append them to the group's gallery.

        Images that fail to upload are skipped. If none of them succeed the
        group is left unchanged and ``ServiceError`` is raised.
        """
        if self._media is None:
            raise ServiceError("Image uploads are not configured")

        async with self._uow_factory() as uow:
            group = await uow.groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(str(group_id))
        if group.creator_id != requester_id:
            raise ForbiddenError("Only the creator can add photos to this group")

        urls: list[str] = []
        for index, image in enumerate(images):
            result = await self._media.upload_image(image, gallery_photo_path(group_id, index))
            if result.success:
                urls.append(result.url)
            else:
                logger.warning(
                    "group_photo_skipped",
                    group_id=str(group_id),
                    uri=image.uri,
                    error=result.error,
                )

        if not urls:
            raise ServiceError("None of the photos could be uploaded")

        async with self._uow_factory() as uow:
            updated = await uow.groups.update(
                group_id, {"photos": [*group.photos, *urls]}, requester_id
            )
            if updated is None:
                raise ForbiddenError("Only the creator can add photos to this group")
            await uow.commit()
            return updated

    # --- Internal helpers ---

    async def _resolve_photo(self, photo: str | None, group_name: str) -> str:
        """Upload a local photo reference and return the stored URL."""
        if not photo:
            return ""
        if not is_local_ref(photo):
            return photo
        if self._media is None:
            logger.warning("group_photo_upload_unavailable", uri=photo)
            return ""

        result = await self._media.upload_image(LocalImage(uri=photo), group_photo_path(group_name))
        if not result.success:
            logger.warning("group_photo_upload_failed", uri=photo, error=result.error)
            return ""
        return result.url

    @staticmethod
    def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
        normalized: dict[str, Any] = {}
        for key, value in changes.items():
            if isinstance(value, str):
                value = value.strip()
            if key == "contact":
                value = value.pruned()
            if key == "disciplines":
                value = sorted({str(getattr(d, "value", d)) for d in value})
            normalized[key] = value
        return normalized
