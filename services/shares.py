"""
Share links.

Management operations are scoped by ``(share_token, created_by)``: a link is
only addressable by its creator. Public viewing is a separate read path that
checks visibility, expiry, view limit and password before counting the view.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from core.exceptions import AuthorizationError, NotFoundError, ShareExpiredError
from core.security import generate_share_token, hash_password, verify_password
from database.models import Project, ProjectShare, ShareVisibility, Transformation
from database.repositories import ProjectRepository, ShareRepository, TransformationRepository

from .ownership import ensure_owner

logger = logging.getLogger(__name__)

PUBLIC_ITEMS_LIMIT = 6
EMBED_WIDTH = 800
EMBED_HEIGHT = 600

SHARE_NOT_FOUND = "Share not found"
WRONG_PASSWORD = "Contraseña incorrecta"


@dataclass
class ShareLinks:
    """What the creator gets back after creating a share."""

    share: ProjectShare
    share_url: str
    og_image_url: str
    embed_code: str


@dataclass
class PublicShareView:
    share: ProjectShare
    project: Project
    items: list[Transformation] = field(default_factory=list)


def build_share_links(share: ProjectShare) -> ShareLinks:
    site_url = get_settings().site_url.rstrip("/")
    share_url = f"{site_url}/share/{share.share_token}"
    return ShareLinks(
        share=share,
        share_url=share_url,
        og_image_url=f"/api/og?token={share.share_token}",
        embed_code=(
            f'<iframe src="{share_url}" width="{EMBED_WIDTH}" '
            f'height="{EMBED_HEIGHT}" frameborder="0"></iframe>'
        ),
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(share: ProjectShare, now: datetime | None = None) -> bool:
    if share.expires_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    return _as_utc(share.expires_at) < now


def views_exhausted(share: ProjectShare) -> bool:
    return share.max_views is not None and share.current_views >= share.max_views


def validate_share_password(share: ProjectShare, password: str | None) -> bool:
    """True when the share has no password or ``password`` matches it."""
    if not share.password_hash:
        return True
    if not password:
        return False
    return verify_password(password, share.password_hash)


class ShareService:
    """Share link operations for one request session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.shares = ShareRepository(session)
        self.projects = ProjectRepository(session)
        self.transformations = TransformationRepository(session)

    async def create(
        self,
        user_id: UUID,
        project_id: UUID,
        visibility: str = ShareVisibility.UNLISTED.value,
        title: str | None = None,
        description: str | None = None,
        featured_items: list[UUID] | None = None,
        expires_at: datetime | None = None,
        max_views: int | None = None,
        password: str | None = None,
    ) -> ShareLinks:
        """Create a share link for a project the caller owns."""
        project = ensure_owner(
            await self.projects.get_by_id(project_id),
            user_id,
            "Proyecto no encontrado",
            "No tienes acceso a este proyecto",
        )

        share = await self.shares.create(
            share_token=generate_share_token(),
            created_by=user_id,
            project_id=project.id,
            visibility=visibility,
            title=title or project.name,
            description=description,
            featured_items=[str(item) for item in featured_items or []],
            expires_at=expires_at,
            max_views=max_views,
            password_hash=hash_password(password) if password else None,
        )
        logger.info(f"Share {share.share_token} created for project {project.id}")
        return build_share_links(share)

    async def list_own(self, user_id: UUID) -> list[ProjectShare]:
        return await self.shares.list_by_creator(user_id)

    async def get_own(self, user_id: UUID, share_token: str) -> ProjectShare:
        share = await self.shares.get_owned(share_token, user_id)
        if share is None:
            raise NotFoundError(SHARE_NOT_FOUND)
        return share

    async def update_own(self, user_id: UUID, share_token: str, updates: dict[str, Any]) -> ProjectShare:
        """
        Apply the given fields. Repeating the same update yields the same state.

        ``password`` is hashed; ``featured_items`` are stored as strings and
        null clears them. A null ``visibility`` leaves it unchanged.
        """
        share = await self.get_own(user_id, share_token)

        fields = dict(updates)
        if "visibility" in fields and fields["visibility"] is None:
            del fields["visibility"]
        if "password" in fields:
            password = fields.pop("password")
            fields["password_hash"] = hash_password(password) if password else None
        if "featured_items" in fields:
            fields["featured_items"] = [str(item) for item in fields["featured_items"] or []]

        return await self.shares.update(share, **fields)

    async def delete_own(self, user_id: UUID, share_token: str) -> bool:
        """Delete by token and creator; deleting a missing link is a no-op."""
        deleted = await self.shares.delete_owned(share_token, user_id)
        if deleted:
            logger.info(f"Share {share_token} deleted")
        return deleted

    async def view_public(self, share_token: str, password: str | None = None) -> PublicShareView:
        """
        Resolve a share for an anonymous viewer and count the view.

        Raises:
            NotFoundError: unknown token, private share or missing project
            ShareExpiredError: past expires_at or out of views
            AuthorizationError: wrong or missing password
        """
        share = await self.shares.get_by_token(share_token)
        if share is None or share.visibility == ShareVisibility.PRIVATE.value:
            raise NotFoundError(SHARE_NOT_FOUND)

        if is_expired(share) or views_exhausted(share):
            raise ShareExpiredError()

        if not validate_share_password(share, password):
            raise AuthorizationError(WRONG_PASSWORD)

        project = await self.projects.get_by_id(share.project_id)
        if project is None:
            raise NotFoundError("Proyecto no encontrado")

        if not await self.shares.register_view(share.id):
            raise ShareExpiredError()

        if share.featured_items:
            items = await self.transformations.list_completed_by_project(
                project.id,
                ids=[UUID(item) for item in share.featured_items],
            )
        else:
            items = await self.transformations.list_completed_by_project(
                project.id,
                limit=PUBLIC_ITEMS_LIMIT,
            )

        return PublicShareView(share=share, project=project, items=items)
