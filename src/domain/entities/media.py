"""Image references handed over by device media capture."""

from dataclasses import dataclass
from pathlib import Path

LOCAL_FILE_PREFIX = "file://"
DEFAULT_ASPECT_RATIO = 1.0


def is_local_ref(ref: str | None) -> bool:
    """True when a photo reference still points at a file on the device."""
    return ref is not None and ref.startswith(LOCAL_FILE_PREFIX)


@dataclass(frozen=True)
class LocalImage:
    """A picked or captured image that has not been uploaded yet."""

    uri: str
    width: int | None = None
    height: int | None = None

    @property
    def aspect_ratio(self) -> float:
        """Width over height, or 1.0 when the dimensions are unknown."""
        if self.width and self.height and self.width > 0 and self.height > 0:
            return self.width / self.height
        return DEFAULT_ASPECT_RATIO

    @property
    def path(self) -> Path:
        """Filesystem path of the image."""
        if self.uri.startswith(LOCAL_FILE_PREFIX):
            return Path(self.uri[len(LOCAL_FILE_PREFIX):])
        return Path(self.uri)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an image upload."""

    success: bool
    url: str = ""
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    error: str | None = None
