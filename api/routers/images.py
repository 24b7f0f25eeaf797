"""
Image endpoints.

Endpoints:
- GET /api/images/{id} - Image details
- DELETE /api/images/{id} - Delete an image, its file and its variants
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from api.dependencies import RequestContext, get_request_context, get_storage_provider
from api.schemas.common import SuccessResponse
from api.schemas.projects import ImageDetailResponse, ImageInfo
from services.projects import delete_image, get_owned_image
from services.storage import StorageProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/{image_id}", response_model=ImageDetailResponse)
async def get_image(
    image_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
):
    image = await get_owned_image(ctx.images, image_id, ctx.user.id)
    return ImageDetailResponse(image=ImageInfo.model_validate(image))


@router.delete("/{image_id}", response_model=SuccessResponse)
async def remove_image(
    image_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    storage: StorageProvider = Depends(get_storage_provider),
):
    """Delete one of the caller's images. Variants generated from it go too."""
    await delete_image(ctx.projects, ctx.images, storage, image_id, ctx.user.id)
    return SuccessResponse(message="Imagen eliminada exitosamente")
