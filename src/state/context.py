"""Explicitly constructed application context.

Bundles settings, the user session, the theme and the record services,
and builds state managers bound to them. Choose the backend with
``settings.backend``.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import structlog

from core.config import Settings
from core.exceptions import ServiceError
from core.logging import setup_logging
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.group_service import GroupService
from domain.services.media_service import MediaService
from domain.services.membership_service import MembershipService
from domain.services.post_service import PostService
from domain.services.reaction_service import ReactionService
from state.groups import GroupCollection
from state.posts import PostCollection
from state.roster import RosterView
from state.session import UserSession
from state.theme import FilePreferenceStore, ThemeState

logger = structlog.get_logger()


@dataclass
class AppContext:
    """Everything the presentation layer needs, passed by reference."""

    settings: Settings
    session: UserSession
    theme: ThemeState
    group_service: GroupService
    membership_service: MembershipService
    post_service: PostService
    reaction_service: ReactionService
    _closers: list[Callable[[], Awaitable[None]]] = field(default_factory=list)

    def groups(self) -> GroupCollection:
        return GroupCollection(self.group_service, self.membership_service, self.session)

    def posts(self) -> PostCollection:
        return PostCollection(self.post_service, self.reaction_service, self.session)

    def roster(self) -> RosterView:
        return RosterView(
            self.membership_service,
            self.session,
            page_size=self.settings.roster_page_size,
        )

    async def aclose(self) -> None:
        """Release HTTP clients and database engines."""
        for close in self._closers:
            await close()
        self._closers.clear()


def build_context(
    settings: Settings,
    uow_factory: Callable[[], IUnitOfWork],
    media: MediaService | None,
    session: UserSession | None = None,
    closers: list[Callable[[], Awaitable[None]]] | None = None,
) -> AppContext:
    """Wire services over an existing unit-of-work factory."""
    session = session or UserSession()
    return AppContext(
        settings=settings,
        session=session,
        theme=ThemeState(FilePreferenceStore(settings.theme_preference_path)),
        group_service=GroupService(uow_factory, media),
        membership_service=MembershipService(uow_factory),
        post_service=PostService(uow_factory, media),
        reaction_service=ReactionService(uow_factory),
        _closers=list(closers or []),
    )


async def create_context(
    settings: Settings, session: UserSession | None = None
) -> AppContext:
    """Build a context for the configured backend."""
    setup_logging(settings.log_level, json_logs=settings.is_production)
    session = session or UserSession()

    if settings.backend == "database":
        from infrastructure.database.session import (
            create_engine,
            create_schema,
            create_session_factory,
        )
        from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
        from infrastructure.storage.local_storage import LocalMediaStorage

        engine = create_engine(settings)
        await create_schema(engine)
        session_factory = create_session_factory(engine)
        storage = LocalMediaStorage(settings.media_dir, settings.media_base_url)
        uow_factory: Callable[[], IUnitOfWork] = lambda: SQLAlchemyUnitOfWork(session_factory)
        closers = [engine.dispose]
    else:
        if not settings.supabase_url:
            raise ServiceError("SUPABASE_URL is not configured")

        from infrastructure.storage.supabase_storage import SupabaseMediaStorage
        from infrastructure.supabase.client import SupabaseClient
        from infrastructure.supabase.supabase_uow import SupabaseUnitOfWork

        client = SupabaseClient(
            settings.supabase_rest_url,
            settings.supabase_anon_key,
            timeout=settings.http_timeout_seconds,
            access_token=session.access_token,
        )
        storage = SupabaseMediaStorage(
            client, settings.supabase_storage_url, settings.storage_bucket
        )
        uow_factory = lambda: SupabaseUnitOfWork(client)
        closers = [client.aclose]

    media = MediaService(
        storage,
        max_bytes=settings.upload_max_bytes,
        max_attempts=settings.upload_max_attempts,
        retry_delay=settings.upload_retry_delay_seconds,
    )
    logger.info("context_created", backend=settings.backend, app_env=settings.app_env)
    return build_context(settings, uow_factory, media, session=session, closers=closers)
