"""
Share repository.

Management lookups are always scoped by ``(share_token, created_by)``.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import desc, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import ProjectShare


class ShareRepository:
    """Repository for ProjectShare model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        share_token: str,
        created_by: UUID,
        project_id: UUID,
        visibility: str,
        title: str | None = None,
        description: str | None = None,
        featured_items: list[str] | None = None,
        expires_at: datetime | None = None,
        max_views: int | None = None,
        password_hash: str | None = None,
    ) -> ProjectShare:
        share = ProjectShare(
            share_token=share_token,
            created_by=created_by,
            project_id=project_id,
            visibility=visibility,
            title=title,
            description=description,
            featured_items=featured_items or [],
            expires_at=expires_at,
            max_views=max_views,
            current_views=0,
            password_hash=password_hash,
        )
        self.session.add(share)
        await self.session.flush()
        return share

    async def get_by_token(self, share_token: str) -> ProjectShare | None:
        """Unscoped lookup, for the public read path only."""
        result = await self.session.execute(
            select(ProjectShare).where(ProjectShare.share_token == share_token)
        )
        return result.scalar_one_or_none()

    async def get_owned(self, share_token: str, created_by: UUID) -> ProjectShare | None:
        result = await self.session.execute(
            select(ProjectShare).where(
                ProjectShare.share_token == share_token,
                ProjectShare.created_by == created_by,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_creator(self, created_by: UUID) -> list[ProjectShare]:
        result = await self.session.execute(
            select(ProjectShare)
            .where(ProjectShare.created_by == created_by)
            .order_by(desc(ProjectShare.created_at))
        )
        return list(result.scalars().all())

    async def update(self, share: ProjectShare, **fields) -> ProjectShare:
        for key, value in fields.items():
            setattr(share, key, value)
        await self.session.flush()
        return share

    async def delete_owned(self, share_token: str, created_by: UUID) -> bool:
        share = await self.get_owned(share_token, created_by)
        if share is None:
            return False
        await self.session.delete(share)
        await self.session.flush()
        return True

    async def register_view(self, share_id: UUID) -> bool:
        """
        Count one view.

        The max_views limit is part of the same UPDATE, so the counter never
        goes past it. Returns False when the limit was already reached.
        """
        result = await self.session.execute(
            update(ProjectShare)
            .where(
                ProjectShare.id == share_id,
                or_(
                    ProjectShare.max_views.is_(None),
                    ProjectShare.current_views < ProjectShare.max_views,
                ),
            )
            .values(
                current_views=ProjectShare.current_views + 1,
                last_viewed_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
