"""Supabase Storage implementation of the media storage."""

import logging

import httpx

from core.exceptions import ServiceError
from infrastructure.supabase.client import SupabaseClient

logger = logging.getLogger(__name__)


class SupabaseMediaStorage:
    """Uploads objects into a public Supabase Storage bucket."""

    def __init__(self, client: SupabaseClient, storage_url: str, bucket: str = "posts") -> None:
        self._client = client
        self._storage_url = storage_url.rstrip("/")
        self._bucket = bucket

    def public_url(self, path: str) -> str:
        return f"{self._storage_url}/object/public/{self._bucket}/{path}"

    async def upload(self, path: str, content: bytes, content_type: str = "image/jpeg") -> str:
        """Store ``content`` under ``path`` (overwriting) and return its public URL."""
        headers = self._client.auth_headers()
        headers["Content-Type"] = content_type
        headers["x-upsert"] = "true"

        try:
            response = await self._client.http.post(
                f"{self._storage_url}/object/{self._bucket}/{path}",
                content=content,
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Storage upload of %s failed with %s: %s",
                path,
                exc.response.status_code,
                exc.response.text,
            )
            raise ServiceError(
                "Could not upload the image",
                details={"status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Storage upload of %s failed: %s", path, exc)
            raise ServiceError("Could not reach the storage server") from exc

        return self.public_url(path)
