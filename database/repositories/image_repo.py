"""
Image repository for uploaded base images.
"""

from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Image, ImageType, Transformation


class ImageRepository:
    """Repository for Image model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, image_id: UUID) -> Image | None:
        """Get image by ID."""
        result = await self.session.execute(select(Image).where(Image.id == image_id))
        return result.scalar_one_or_none()

    async def get_room_image(self, image_id: UUID) -> Image | None:
        """Get an image only if it is a base (room) image."""
        result = await self.session.execute(
            select(Image).where(
                Image.id == image_id,
                Image.image_type == ImageType.ROOM.value,
            )
        )
        return result.scalar_one_or_none()

    async def count_by_project(self, project_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Image).where(Image.project_id == project_id)
        )
        return result.scalar_one()

    async def list_by_project(self, project_id: UUID) -> list[Image]:
        result = await self.session.execute(
            select(Image)
            .where(Image.project_id == project_id)
            .order_by(Image.upload_order)
        )
        return list(result.scalars().all())

    async def create(
        self,
        project_id: UUID,
        user_id: UUID,
        url: str,
        storage_key: str,
        name: str | None,
        width: int | None,
        height: int | None,
        size_bytes: int,
        content_type: str,
        upload_order: int,
        is_primary: bool,
        image_type: str = ImageType.ROOM.value,
    ) -> Image:
        """Create a new image record."""
        image = Image(
            project_id=project_id,
            user_id=user_id,
            url=url,
            storage_key=storage_key,
            name=name,
            width=width,
            height=height,
            size_bytes=size_bytes,
            content_type=content_type,
            upload_order=upload_order,
            is_primary=is_primary,
            image_type=image_type,
        )
        self.session.add(image)
        await self.session.flush()
        return image

    async def list_by_user(
        self,
        user_id: UUID,
        image_type: str | None = ImageType.ROOM.value,
        project_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[tuple[Image, int]]:
        """
        A user's images, newest first, each with its number of variants.

        ``image_type=None`` lists every type.
        """
        variant_count = (
            select(func.count(Transformation.id))
            .where(Transformation.base_image_id == Image.id)
            .correlate(Image)
            .scalar_subquery()
        )
        query = select(Image, variant_count).where(Image.user_id == user_id)
        query = self._filter_gallery(query, image_type, project_id)

        result = await self.session.execute(
            query.order_by(desc(Image.created_at)).limit(limit).offset(offset)
        )
        return [(image, count or 0) for image, count in result.all()]

    async def count_by_user(
        self,
        user_id: UUID,
        image_type: str | None = ImageType.ROOM.value,
        project_id: UUID | None = None,
    ) -> int:
        query = select(func.count()).select_from(Image).where(Image.user_id == user_id)
        query = self._filter_gallery(query, image_type, project_id)
        result = await self.session.execute(query)
        return result.scalar_one()

    @staticmethod
    def _filter_gallery(query, image_type: str | None, project_id: UUID | None):
        if image_type:
            query = query.where(Image.image_type == image_type)
        if project_id:
            query = query.where(Image.project_id == project_id)
        return query

    async def delete(self, image: Image) -> None:
        """Delete an image together with the variants generated from it."""
        await self.session.execute(
            delete(Transformation).where(Transformation.base_image_id == image.id)
        )
        await self.session.delete(image)
        await self.session.flush()
