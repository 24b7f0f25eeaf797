"""
Variant endpoints.

Endpoints:
- PATCH /api/variants/{id}/favorite - Toggle is_favorite
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import inspect

from api.dependencies import RequestContext, get_request_context
from api.schemas.design import ColorPaletteInfo, DesignStyleInfo, RoomTypeInfo, SeasonalThemeInfo
from api.schemas.variants import FavoriteResponse, VariantInfo
from database.models import Transformation
from services.ownership import ensure_owner
from services.providers import parse_metadata

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/variants", tags=["variants"])


# ============ Helpers ============


def _loaded(variant: Transformation, attr: str):
    """Relationship value if it was eager-loaded, else None."""
    if attr in inspect(variant).unloaded:
        return None
    return getattr(variant, attr)


def _metadata(variant: Transformation) -> dict:
    data = variant.generation_metadata or {}
    tagged = parse_metadata(data)
    return tagged.model_dump() if tagged else data


def variant_to_info(variant: Transformation) -> VariantInfo:
    """Convert a transformation row to its response model."""
    style = _loaded(variant, "style")
    room_type = _loaded(variant, "room_type")
    palette = _loaded(variant, "color_palette")
    theme = _loaded(variant, "seasonal_theme")

    return VariantInfo(
        id=variant.id,
        project_id=variant.project_id,
        base_image_id=variant.base_image_id,
        status=variant.status,
        provider=variant.provider,
        prompt_used=variant.prompt_used,
        custom_instructions=variant.custom_instructions,
        result_image_url=variant.result_image_url,
        error_message=variant.error_message,
        is_favorite=variant.is_favorite,
        tokens_consumed=variant.tokens_consumed,
        processing_time_ms=variant.processing_time_ms,
        metadata=_metadata(variant),
        style=DesignStyleInfo.model_validate(style) if style else None,
        room_type=RoomTypeInfo.model_validate(room_type) if room_type else None,
        color_palette=ColorPaletteInfo.model_validate(palette) if palette else None,
        seasonal_theme=SeasonalThemeInfo.model_validate(theme) if theme else None,
        created_at=variant.created_at,
        completed_at=variant.completed_at,
    )


# ============ Endpoints ============


@router.patch("/{variant_id}/favorite", response_model=FavoriteResponse)
async def toggle_favorite(
    variant_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
):
    """Flip is_favorite on a variant the caller owns."""
    variant = ensure_owner(
        await ctx.transformations.get_by_id(variant_id),
        ctx.user.id,
        "Variante no encontrada",
        "No autorizado",
    )
    is_favorite = await ctx.transformations.toggle_favorite(variant)
    return FavoriteResponse(is_favorite=is_favorite)
