"""Media storage protocol."""

from typing import Protocol


class IMediaStorage(Protocol):
    """Object storage for uploaded images."""

    async def upload(self, path: str, content: bytes, content_type: str = "image/jpeg") -> str:
        """Store ``content`` under ``path`` and return its public URL."""
        ...
