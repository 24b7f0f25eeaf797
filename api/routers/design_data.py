"""
Design catalog endpoints.

Endpoints:
- GET /api/design-data - Every active catalog in one response
- GET /api/styles - Active design styles
- GET /api/room-types - Active room types
"""

from fastapi import APIRouter, Depends

from api.dependencies import RequestContext, get_request_context
from api.schemas.design import (
    ColorPaletteInfo,
    DesignDataResponse,
    DesignStyleInfo,
    RoomTypeInfo,
    RoomTypeListResponse,
    SeasonalThemeInfo,
    StyleListResponse,
)

router = APIRouter(prefix="/design-data", tags=["design"])
catalog_router = APIRouter(tags=["design"])


@router.get("", response_model=DesignDataResponse)
async def get_design_data(ctx: RequestContext = Depends(get_request_context)):
    """Active styles, room types, palettes and seasonal themes."""
    return DesignDataResponse(
        styles=[DesignStyleInfo.model_validate(s) for s in await ctx.catalog.list_styles()],
        room_types=[RoomTypeInfo.model_validate(r) for r in await ctx.catalog.list_room_types()],
        color_palettes=[ColorPaletteInfo.model_validate(p) for p in await ctx.catalog.list_palettes()],
        seasonal_themes=[
            SeasonalThemeInfo.model_validate(t) for t in await ctx.catalog.list_seasonal_themes()
        ],
    )


@catalog_router.get("/styles", response_model=StyleListResponse)
async def list_styles(ctx: RequestContext = Depends(get_request_context)):
    return StyleListResponse(
        styles=[DesignStyleInfo.model_validate(s) for s in await ctx.catalog.list_styles()]
    )


@catalog_router.get("/room-types", response_model=RoomTypeListResponse)
async def list_room_types(ctx: RequestContext = Depends(get_request_context)):
    return RoomTypeListResponse(
        room_types=[RoomTypeInfo.model_validate(r) for r in await ctx.catalog.list_room_types()]
    )
