"""
Pydantic schemas for the design catalog.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    """Common fields of every catalog entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    code: str
    description: str | None = None
    sort_order: int = 0


class DesignStyleInfo(CatalogItem):
    base_prompt: str


class RoomTypeInfo(CatalogItem):
    pass


class ColorPaletteInfo(CatalogItem):
    primary_colors: list = Field(default_factory=list)


class SeasonalThemeInfo(CatalogItem):
    pass


class DesignDataResponse(BaseModel):
    """Active catalog entries, each list ordered by sort_order."""

    styles: list[DesignStyleInfo] = Field(default_factory=list)
    room_types: list[RoomTypeInfo] = Field(default_factory=list, serialization_alias="roomTypes")
    color_palettes: list[ColorPaletteInfo] = Field(
        default_factory=list, serialization_alias="colorPalettes"
    )
    seasonal_themes: list[SeasonalThemeInfo] = Field(
        default_factory=list, serialization_alias="seasonalThemes"
    )


class StyleListResponse(BaseModel):
    styles: list[DesignStyleInfo] = Field(default_factory=list)


class RoomTypeListResponse(BaseModel):
    room_types: list[RoomTypeInfo] = Field(default_factory=list, serialization_alias="roomTypes")
