"""Image upload service with retries."""

import asyncio
import random
import re
import time
from collections.abc import Awaitable, Callable

import structlog

from core.exceptions import ServiceError
from domain.entities.media import LocalImage, UploadResult
from domain.repositories.media_storage import IMediaStorage
from domain.validation import validate_image_format

logger = structlog.get_logger()

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}

_UNSAFE_CHARS = re.compile(r"[^a-z0-9]+")


def content_type_for(uri: str) -> str:
    """MIME type from the file extension, JPEG when unknown."""
    extension = uri.rsplit(".", 1)[-1].lower() if "." in uri else ""
    return CONTENT_TYPES.get(extension, "image/jpeg")


def safe_name(value: str) -> str:
    """Lowercase storage-safe slug of a display name."""
    return _UNSAFE_CHARS.sub("_", value.lower()).strip("_") or "parche"


def _timestamp() -> int:
    return int(time.time() * 1000)


def post_image_path(owner_id: object) -> str:
    suffix = "".join(random.choices("abcdefghijklmnopqrstuvwxyz0123456789", k=7))
    return f"{owner_id}/post_{_timestamp()}_{suffix}.jpg"


def group_photo_path(group_name: str) -> str:
    return f"parches/{safe_name(group_name)}_{_timestamp()}.jpg"


def gallery_photo_path(group_id: object, index: int) -> str:
    return f"parches/{group_id}/gallery_{_timestamp()}_{index}.jpg"


class MediaService:
    """Uploads local images to the media storage.

    Uploads are retried with a linear back-off. Failures are reported in
    the returned ``UploadResult`` instead of being raised, so callers can
    decide whether a missing image is fatal.
    """

    def __init__(
        self,
        storage: IMediaStorage,
        max_bytes: int = 10 * 1024 * 1024,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._storage = storage
        self._max_bytes = max_bytes
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._sleep = sleep

    async def upload_image(self, image: LocalImage, path: str) -> UploadResult:
        """Read ``image`` from disk and store it under ``path``."""
        format_check = validate_image_format(image.uri)
        if not format_check.is_valid:
            return UploadResult(success=False, error=format_check.errors[0])

        try:
            content = await asyncio.to_thread(image.path.read_bytes)
        except OSError as exc:
            logger.warning("image_read_failed", uri=image.uri, error=str(exc))
            return UploadResult(success=False, error="Could not read the image file")

        if not content:
            return UploadResult(success=False, error="The image file is empty")
        if len(content) > self._max_bytes:
            limit_mb = self._max_bytes // (1024 * 1024)
            return UploadResult(
                success=False,
                error=f"The image is too large (max {limit_mb}MB)",
            )

        content_type = content_type_for(image.uri)
        last_error = ""
        for attempt in range(1, self._max_attempts + 1):
            try:
                url = await self._storage.upload(path, content, content_type)
            except ServiceError as exc:
                last_error = exc.message
                logger.warning(
                    "image_upload_failed",
                    path=path,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error=exc.message,
                )
                if attempt < self._max_attempts:
                    await self._sleep(self._retry_delay * attempt)
                continue

            logger.info("image_uploaded", path=path, size=len(content), attempt=attempt)
            return UploadResult(success=True, url=url, aspect_ratio=image.aspect_ratio)

        return UploadResult(
            success=False,
            error=f"Upload failed after {self._max_attempts} attempts: {last_error}",
        )
