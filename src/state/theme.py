"""Light/dark theme preference."""

import asyncio
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

logger = structlog.get_logger()


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


DEFAULT_THEME = Theme.DARK


class IPreferenceStore(Protocol):
    """Persistent storage for the theme preference."""

    async def load(self) -> str | None:
        ...

    async def save(self, value: str) -> None:
        ...


class Preferences(BaseModel):
    """On-disk shape of the preference file."""

    model_config = ConfigDict(extra="ignore")

    theme: str | None = None


class FilePreferenceStore:
    """Keeps preferences in a small JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    async def load(self) -> str | None:
        try:
            prefs = await asyncio.to_thread(self._read)
        except (OSError, ValidationError) as exc:
            logger.warning("theme_preference_unreadable", path=str(self._path), error=str(exc))
            return None
        return prefs.theme

    async def save(self, value: str) -> None:
        await asyncio.to_thread(self._write, Preferences(theme=value))

    def _read(self) -> Preferences:
        if not self._path.exists():
            return Preferences()
        return Preferences.model_validate_json(self._path.read_text(encoding="utf-8"))

    def _write(self, prefs: Preferences) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(prefs.model_dump_json(), encoding="utf-8")


def _parse(value: str | None) -> Theme | None:
    try:
        return Theme(value) if value else None
    except ValueError:
        return None


class ThemeState:
    """Theme of the app.

    ``initialize`` picks the persisted preference, then the system
    preference, then dark. ``toggle_theme`` is the only way to change it.
    """

    def __init__(
        self,
        store: IPreferenceStore,
        system_theme: Callable[[], str | None] | None = None,
    ) -> None:
        self._store = store
        self._system_theme = system_theme
        self.theme = DEFAULT_THEME
        self.is_loading = True

    @property
    def is_dark(self) -> bool:
        return self.theme is Theme.DARK

    async def initialize(self) -> Theme:
        persisted = _parse(await self._store.load())
        system = _parse(self._system_theme()) if self._system_theme else None
        self.theme = persisted or system or DEFAULT_THEME
        self.is_loading = False
        logger.debug(
            "theme_initialized",
            theme=self.theme.value,
            source="persisted" if persisted else "system" if system else "default",
        )
        return self.theme

    async def toggle_theme(self) -> Theme:
        """Switch between light and dark and persist the choice."""
        self.theme = Theme.LIGHT if self.is_dark else Theme.DARK
        try:
            await self._store.save(self.theme.value)
        except OSError as exc:
            logger.warning("theme_preference_not_saved", error=str(exc))
        return self.theme
