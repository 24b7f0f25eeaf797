"""
Catalog repository for design styles, room types, palettes and themes.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import ColorPalette, DesignStyle, RoomType, SeasonalTheme


class CatalogRepository:
    """Read access to the design catalogs."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _active(self, model) -> list:
        result = await self.session.execute(
            select(model).where(model.is_active).order_by(model.sort_order)
        )
        return list(result.scalars().all())

    async def _get(self, model, item_id: UUID):
        result = await self.session.execute(select(model).where(model.id == item_id))
        return result.scalar_one_or_none()

    async def _count_active(self, model) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(model).where(model.is_active)
        )
        return result.scalar_one()

    async def list_styles(self) -> list[DesignStyle]:
        return await self._active(DesignStyle)

    async def list_room_types(self) -> list[RoomType]:
        return await self._active(RoomType)

    async def list_palettes(self) -> list[ColorPalette]:
        return await self._active(ColorPalette)

    async def list_seasonal_themes(self) -> list[SeasonalTheme]:
        return await self._active(SeasonalTheme)

    async def get_style(self, style_id: UUID) -> DesignStyle | None:
        return await self._get(DesignStyle, style_id)

    async def get_room_type(self, room_type_id: UUID) -> RoomType | None:
        return await self._get(RoomType, room_type_id)

    async def get_palette(self, palette_id: UUID) -> ColorPalette | None:
        return await self._get(ColorPalette, palette_id)

    async def count_styles(self) -> int:
        return await self._count_active(DesignStyle)

    async def count_room_types(self) -> int:
        return await self._count_active(RoomType)
