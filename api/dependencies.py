"""
FastAPI dependency injection for the request context.

Every authenticated endpoint receives one ``RequestContext``: the resolved
caller, the request's database session and repositories built lazily on that
session.
"""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from functools import cached_property

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import SessionUser, require_current_user
from core.config import Settings, get_settings
from core.exceptions import AuthorizationError, ServiceUnavailableError
from core.redis import get_redis_optional
from database import get_session, is_database_available
from database.models import ProfileRole
from database.repositories import (
    CatalogRepository,
    ImageRepository,
    ProfileRepository,
    ProjectRepository,
    ShareRepository,
    TokenRepository,
    TransformationRepository,
)
from services.rate_limit import CooldownService
from services.storage import StorageProvider, get_storage
from services.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


async def get_db_session() -> AsyncGenerator[AsyncSession | None, None]:
    """
    Get database session dependency.

    Returns None if database is not configured/available.
    """
    if not is_database_available():
        yield None
        return

    async for session in get_session():
        yield session


async def require_db_session(
    session: AsyncSession | None = Depends(get_db_session),
) -> AsyncSession:
    """Database session, or 503 when the database is not available."""
    if session is None:
        raise ServiceUnavailableError("Base de datos no disponible")
    return session


def get_storage_provider() -> StorageProvider:
    return get_storage()


async def get_cooldowns() -> CooldownService:
    return CooldownService(await get_redis_optional())


@dataclass
class RequestContext:
    """Per-request state passed explicitly to handlers and services."""

    user: SessionUser
    session: AsyncSession
    settings: Settings = field(default_factory=get_settings)

    @cached_property
    def profiles(self) -> ProfileRepository:
        return ProfileRepository(self.session)

    @cached_property
    def projects(self) -> ProjectRepository:
        return ProjectRepository(self.session)

    @cached_property
    def images(self) -> ImageRepository:
        return ImageRepository(self.session)

    @cached_property
    def transformations(self) -> TransformationRepository:
        return TransformationRepository(self.session)

    @cached_property
    def catalog(self) -> CatalogRepository:
        return CatalogRepository(self.session)

    @cached_property
    def shares(self) -> ShareRepository:
        return ShareRepository(self.session)

    @cached_property
    def ledger(self) -> TokenLedger:
        return TokenLedger(TokenRepository(self.session))


async def get_request_context(
    user: SessionUser = Depends(require_current_user),
    session: AsyncSession = Depends(require_db_session),
) -> RequestContext:
    """
    Build the context for an authenticated request.

    The session check runs first, so a missing session is a 401 before any
    database work happens.
    """
    return RequestContext(user=user, session=session)


async def require_admin(
    ctx: RequestContext = Depends(get_request_context),
) -> RequestContext:
    """Context for an admin caller; 403 for everyone else."""
    role = await ctx.profiles.get_role(ctx.user.id)
    if role != ProfileRole.ADMIN.value:
        logger.warning(f"Non-admin {ctx.user.id} tried to reach an admin endpoint")
        raise AuthorizationError("Acceso denegado - Solo administradores")
    return ctx
