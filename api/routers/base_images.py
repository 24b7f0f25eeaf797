"""
Base image endpoints.

Endpoints:
- POST /api/base-images/{id}/generate-variant - Stage a new variant
- GET /api/base-images/{id}/variants - Every attempt for the image
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from api.dependencies import (
    RequestContext,
    get_cooldowns,
    get_request_context,
    get_storage_provider,
)
from api.routers.variants import variant_to_info
from api.schemas.variants import (
    GenerateVariantRequest,
    GenerateVariantResponse,
    VariantListResponse,
)
from services.ownership import ensure_owner
from services.prompts import RoomDimensions
from services.rate_limit import CooldownService
from services.staging import GenerateVariantCommand, StagingService
from services.storage import StorageProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/base-images", tags=["base-images"])


@router.post("/{base_image_id}/generate-variant", response_model=GenerateVariantResponse)
async def generate_variant(
    base_image_id: UUID,
    request: GenerateVariantRequest,
    ctx: RequestContext = Depends(get_request_context),
    storage: StorageProvider = Depends(get_storage_provider),
    cooldowns: CooldownService = Depends(get_cooldowns),
):
    """
    Generate one staged variant of a base image.

    Tokens are only debited when the variant completes.
    """
    dimensions = None
    if request.dimensions:
        dimensions = RoomDimensions(
            width=request.dimensions.width,
            height=request.dimensions.height,
        )

    service = StagingService(ctx.session, storage, cooldowns)
    variant = await service.generate_variant(
        ctx.user.id,
        GenerateVariantCommand(
            base_image_id=base_image_id,
            style_id=request.style_id,
            room_type_id=request.room_type_id,
            palette_id=request.color_scheme_id,
            custom_prompt=request.custom_prompt,
            dimensions=dimensions,
            provider=request.provider,
        ),
    )

    # Reload with catalog entries for the response
    loaded = await ctx.transformations.list_by_ids_for_user([variant.id], ctx.user.id)
    return GenerateVariantResponse(transformation=variant_to_info(loaded[0] if loaded else variant))


@router.get("/{base_image_id}/variants", response_model=VariantListResponse)
async def list_variants(
    base_image_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
):
    """All generation attempts for a base image, newest first."""
    ensure_owner(
        await ctx.images.get_room_image(base_image_id),
        ctx.user.id,
        "Imagen base no encontrada",
        "No autorizado para ver estas variantes",
    )
    variants = await ctx.transformations.list_by_base_image(base_image_id)
    return VariantListResponse(variants=[variant_to_info(v) for v in variants])
