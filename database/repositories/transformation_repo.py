"""
Transformation repository for variants and their lifecycle.
"""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from database.models import Transformation, TransformationStatus

_CATALOG_OPTIONS = (
    selectinload(Transformation.style),
    selectinload(Transformation.room_type),
    selectinload(Transformation.color_palette),
    selectinload(Transformation.seasonal_theme),
)


class TransformationRepository:
    """Repository for Transformation model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, transformation_id: UUID) -> Transformation | None:
        result = await self.session.execute(
            select(Transformation).where(Transformation.id == transformation_id)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: UUID,
        project_id: UUID,
        base_image_id: UUID,
        style_id: UUID,
        prompt_used: str,
        provider: str,
        room_type_id: UUID | None = None,
        palette_id: UUID | None = None,
        custom_instructions: str | None = None,
    ) -> Transformation:
        """Insert a variant in the ``requested`` state."""
        transformation = Transformation(
            user_id=user_id,
            project_id=project_id,
            base_image_id=base_image_id,
            style_id=style_id,
            room_type_id=room_type_id,
            palette_id=palette_id,
            prompt_used=prompt_used,
            custom_instructions=custom_instructions,
            provider=provider,
            status=TransformationStatus.REQUESTED.value,
            tokens_consumed=0,
            generation_metadata={},
        )
        self.session.add(transformation)
        await self.session.flush()
        return transformation

    async def save(self, transformation: Transformation) -> Transformation:
        await self.session.flush()
        return transformation

    async def toggle_favorite(self, transformation: Transformation) -> bool:
        """Flip is_favorite and return the new value."""
        transformation.is_favorite = not transformation.is_favorite
        await self.session.flush()
        return transformation.is_favorite

    async def list_by_ids_for_user(
        self,
        ids: Sequence[UUID],
        user_id: UUID,
    ) -> list[Transformation]:
        """Variants among ``ids`` that belong to ``user_id``, with catalog rows."""
        if not ids:
            return []
        result = await self.session.execute(
            select(Transformation)
            .options(*_CATALOG_OPTIONS)
            .where(
                Transformation.id.in_(list(ids)),
                Transformation.user_id == user_id,
            )
            .order_by(desc(Transformation.created_at))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_by_base_image(self, base_image_id: UUID) -> list[Transformation]:
        """Every generation attempt for a base image, newest first."""
        result = await self.session.execute(
            select(Transformation)
            .options(*_CATALOG_OPTIONS)
            .where(Transformation.base_image_id == base_image_id)
            .order_by(desc(Transformation.created_at))
        )
        return list(result.scalars().all())

    async def list_completed_by_project(
        self,
        project_id: UUID,
        ids: Sequence[UUID] | None = None,
        limit: int | None = None,
    ) -> list[Transformation]:
        """Completed variants of a project, optionally restricted to ``ids``."""
        query = (
            select(Transformation)
            .options(*_CATALOG_OPTIONS)
            .where(
                Transformation.project_id == project_id,
                Transformation.status == TransformationStatus.COMPLETED.value,
            )
        )
        if ids is not None:
            query = query.where(Transformation.id.in_(list(ids)))
        query = query.order_by(desc(Transformation.created_at))
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_user(
        self,
        user_id: UUID,
        status: str | None = None,
        project_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Transformation]:
        """A user's variants across projects, newest first."""
        query = select(Transformation).options(*_CATALOG_OPTIONS).where(Transformation.user_id == user_id)
        if status:
            query = query.where(Transformation.status == status)
        if project_id:
            query = query.where(Transformation.project_id == project_id)

        result = await self.session.execute(
            query.order_by(desc(Transformation.created_at)).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def stats_by_user(self, user_id: UUID) -> dict[str, int]:
        """Variant count per status and the tokens they consumed."""
        result = await self.session.execute(
            select(
                Transformation.status,
                func.count(Transformation.id),
                func.coalesce(func.sum(Transformation.tokens_consumed), 0),
            )
            .where(Transformation.user_id == user_id)
            .group_by(Transformation.status)
        )
        stats = {"total": 0, "tokens_used": 0}
        for status, count, tokens in result.all():
            stats[status] = count
            stats["total"] += count
            stats["tokens_used"] += int(tokens)
        return stats
