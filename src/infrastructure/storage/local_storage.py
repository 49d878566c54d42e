"""Local directory implementation of the media storage."""

import asyncio
from pathlib import Path

import structlog

from core.exceptions import ServiceError

logger = structlog.get_logger()


class LocalMediaStorage:
    """Writes uploads below a directory, for the SQL database backend."""

    def __init__(self, root: Path, base_url: str) -> None:
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")

    async def upload(self, path: str, content: bytes, content_type: str = "image/jpeg") -> str:
        target = (self._root / path).resolve()
        if not target.is_relative_to(self._root.resolve()):
            raise ServiceError("Invalid upload path", details={"path": path})

        try:
            await asyncio.to_thread(_write, target, content)
        except OSError as exc:
            logger.error("media_write_failed", path=path, error=str(exc))
            raise ServiceError("Could not store the image") from exc

        return f"{self._base_url}/{path}"


def _write(target: Path, content: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
