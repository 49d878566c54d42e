"""Base collection state manager.

A manager owns the in-memory list of one entity type together with its
``loading``, ``refreshing`` and ``error`` flags. Every public operation
resolves to an ``OperationResult``; expected failures never raise.

Each fetch takes a generation number. A response is applied only when it
is still the latest one issued, so an older, slower request can never
overwrite newer data, and ``detach()`` makes every in-flight response
stale.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

import structlog

from core.exceptions import AppException, ServiceError
from state.results import OperationResult
from state.session import CurrentUser, UserSession

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")


class CollectionState(Generic[T]):
    """Shared plumbing of the group and post managers."""

    def __init__(self, session: UserSession) -> None:
        self.items: list[T] = []
        self.loading = False
        self.refreshing = False
        self.error: str | None = None
        self._session = session
        self._generation = 0
        self._flag_owner: dict[str, int] = {}
        self._detached = False

    @property
    def current_user(self) -> CurrentUser | None:
        return self._session.user

    @property
    def is_detached(self) -> bool:
        return self._detached

    def detach(self) -> None:
        """Stop applying responses; called when the view goes away."""
        self._detached = True
        self._generation += 1

    def clear_error(self) -> None:
        self.error = None

    # --- Internal helpers ---

    async def _fetch(
        self,
        operation: str,
        fetch: Callable[[], Awaitable[list[T]]],
        flag: str = "loading",
    ) -> OperationResult[list[T]]:
        """Run a list fetch and replace ``items`` if it is still current."""
        self._generation += 1
        generation = self._generation
        self._flag_owner[flag] = generation
        setattr(self, flag, True)

        try:
            items = await fetch()
        except Exception as exc:
            error = self._as_app_error(operation, exc)
            if self._is_current(generation):
                self.error = error.message
            return OperationResult.fail(error)
        finally:
            if self._flag_owner.get(flag) == generation:
                setattr(self, flag, False)

        if not self._is_current(generation):
            logger.debug("stale_response_discarded", operation=operation, generation=generation)
            return OperationResult.ok(items)

        self.items = list(items)
        self.error = None
        return OperationResult.ok(self.items)

    async def _run(
        self, operation: str, action: Callable[[], Awaitable[R]]
    ) -> OperationResult[R]:
        """Run a single-entity call, recording a failure in ``error``."""
        try:
            data = await action()
        except Exception as exc:
            error = self._as_app_error(operation, exc)
            if not self._detached:
                self.error = error.message
            return OperationResult.fail(error)
        return OperationResult.ok(data)

    async def _mutate(
        self,
        operation: str,
        action: Callable[[], Awaitable[R]],
        reload: Callable[[], Awaitable[Any]],
    ) -> OperationResult[R]:
        """Run a mutation and, when it succeeds, reload the canonical list."""
        result = await self._run(operation, action)
        if result.success:
            self.error = None
            await reload()
        return result

    def _require_user(self) -> CurrentUser:
        return self._session.require_user()

    def _is_current(self, generation: int) -> bool:
        return not self._detached and generation == self._generation

    @staticmethod
    def _as_app_error(operation: str, exc: Exception) -> AppException:
        if isinstance(exc, AppException):
            logger.info(
                "operation_failed",
                operation=operation,
                error_code=str(exc.error_code),
                message=exc.message,
            )
            return exc
        logger.exception("operation_crashed", operation=operation)
        return ServiceError(str(exc) or "Unexpected error")
