"""Current-user identity supplied by the host application."""

from dataclasses import dataclass
from uuid import UUID

import structlog

from core.exceptions import AuthRequiredError

logger = structlog.get_logger()


@dataclass(frozen=True)
class CurrentUser:
    """The signed-in user as handed over by the authentication layer."""

    id: UUID
    email: str = ""
    display_name: str | None = None
    access_token: str | None = None


class UserSession:
    """Holder of the current user. Sign-in itself happens elsewhere."""

    def __init__(self, user: CurrentUser | None = None) -> None:
        self._user = user

    @property
    def user(self) -> CurrentUser | None:
        return self._user

    @property
    def user_id(self) -> UUID | None:
        return self._user.id if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def access_token(self) -> str | None:
        return self._user.access_token if self._user else None

    def sign_in(self, user: CurrentUser) -> None:
        self._user = user
        logger.info("session_signed_in", user_id=str(user.id))

    def sign_out(self) -> None:
        if self._user is not None:
            logger.info("session_signed_out", user_id=str(self._user.id))
        self._user = None

    def require_user(self) -> CurrentUser:
        """The current user, or ``AuthRequiredError`` when nobody is signed in."""
        if self._user is None:
            raise AuthRequiredError()
        return self._user
