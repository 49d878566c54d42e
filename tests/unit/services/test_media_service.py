"""Unit tests for MediaService and storage path helpers."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from core.exceptions import ServiceError
from domain.entities.media import LocalImage
from domain.services.media_service import (
    MediaService,
    content_type_for,
    group_photo_path,
    safe_name,
)


@pytest.fixture
def storage() -> AsyncMock:
    storage = AsyncMock()
    storage.upload.return_value = "https://cdn/uploaded.jpg"
    return storage


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(storage: AsyncMock, sleep: AsyncMock) -> MediaService:
    return MediaService(storage, max_bytes=1024, max_attempts=3, retry_delay=0.5, sleep=sleep)


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    path = tmp_path / "board.jpg"
    path.write_bytes(b"\xff\xd8\xff" + b"0" * 100)
    return path


class TestUploadImage:
    @pytest.mark.asyncio
    async def test_success(self, service: MediaService, storage: AsyncMock, image_file: Path):
        image = LocalImage(uri=f"file://{image_file}", width=400, height=300)

        result = await service.upload_image(image, "u/post.jpg")

        assert result.success
        assert result.url == "https://cdn/uploaded.jpg"
        assert result.aspect_ratio == pytest.approx(4 / 3)
        storage.upload.assert_awaited_once_with("u/post.jpg", image_file.read_bytes(), "image/jpeg")

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(
        self, service: MediaService, storage: AsyncMock, sleep: AsyncMock, image_file: Path
    ):
        storage.upload.side_effect = [ServiceError("timeout"), "https://cdn/second.jpg"]

        result = await service.upload_image(LocalImage(uri=str(image_file)), "u/post.jpg")

        assert result.success
        assert result.url == "https://cdn/second.jpg"
        sleep.assert_awaited_once_with(0.5)

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(
        self, service: MediaService, storage: AsyncMock, sleep: AsyncMock, image_file: Path
    ):
        storage.upload.side_effect = ServiceError("timeout")

        result = await service.upload_image(LocalImage(uri=str(image_file)), "u/post.jpg")

        assert not result.success
        assert "3 attempts" in result.error
        assert storage.upload.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_unsupported_format(self, service: MediaService, storage: AsyncMock, tmp_path: Path):
        path = tmp_path / "clip.gif"
        path.write_bytes(b"GIF89a")

        result = await service.upload_image(LocalImage(uri=str(path)), "u/clip.gif")

        assert not result.success
        storage.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_file(self, service: MediaService, tmp_path: Path):
        result = await service.upload_image(LocalImage(uri=str(tmp_path / "gone.jpg")), "u/x.jpg")

        assert not result.success
        assert result.error == "Could not read the image file"

    @pytest.mark.asyncio
    async def test_empty_file(self, service: MediaService, tmp_path: Path):
        path = tmp_path / "empty.png"
        path.write_bytes(b"")

        result = await service.upload_image(LocalImage(uri=str(path)), "u/x.png")

        assert not result.success
        assert result.error == "The image file is empty"

    @pytest.mark.asyncio
    async def test_too_large(self, service: MediaService, storage: AsyncMock, tmp_path: Path):
        path = tmp_path / "big.png"
        path.write_bytes(b"0" * 2048)

        result = await service.upload_image(LocalImage(uri=str(path)), "u/x.png")

        assert not result.success
        assert "too large" in result.error
        storage.upload.assert_not_awaited()


class TestHelpers:
    def test_content_type(self):
        assert content_type_for("a/b.PNG") == "image/png"
        assert content_type_for("a/b.webp") == "image/webp"
        assert content_type_for("a/b") == "image/jpeg"

    def test_safe_name(self):
        assert safe_name("Patín Club Cali!") == "pat_n_club_cali"
        assert safe_name("!!!") == "parche"

    def test_group_photo_path(self):
        path = group_photo_path("Rodadores Norte")
        assert path.startswith("parches/rodadores_norte_")
        assert path.endswith(".jpg")
