"""
Caller's galleries across all projects.

Endpoints:
- GET /api/user/transformations - Variants, with per-status statistics
- GET /api/user/images - Uploaded images, with their variant counts
"""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from api.dependencies import RequestContext, get_request_context
from api.routers.variants import variant_to_info
from api.schemas.projects import ImageInfo, UserImageInfo, UserImagesResponse
from api.schemas.variants import TransformationStatistics, UserTransformationsResponse
from database.models import TransformationStatus

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/transformations", response_model=UserTransformationsResponse)
async def list_user_transformations(
    project_id: UUID | None = Query(default=None, alias="projectId"),
    status: Literal["all", "requested", "processing", "completed", "failed"] = Query(default="all"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    ctx: RequestContext = Depends(get_request_context),
):
    """Newest first. Statistics cover every variant of the caller."""
    variants = await ctx.transformations.list_by_user(
        ctx.user.id,
        status=None if status == "all" else status,
        project_id=project_id,
        limit=limit,
        offset=offset,
    )
    stats = await ctx.transformations.stats_by_user(ctx.user.id)

    return UserTransformationsResponse(
        transformations=[variant_to_info(v) for v in variants],
        total=stats["total"],
        has_more=stats["total"] > offset + limit,
        statistics=TransformationStatistics(
            total=stats["total"],
            completed=stats.get(TransformationStatus.COMPLETED.value, 0),
            processing=stats.get(TransformationStatus.PROCESSING.value, 0),
            failed=stats.get(TransformationStatus.FAILED.value, 0),
            total_tokens_used=stats["tokens_used"],
        ),
    )


@router.get("/images", response_model=UserImagesResponse)
async def list_user_images(
    project_id: UUID | None = Query(default=None, alias="projectId"),
    image_type: Literal["all", "room", "result"] = Query(default="room", alias="type"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    ctx: RequestContext = Depends(get_request_context),
):
    """The caller's images, newest first. ``type=all`` includes results."""
    kind = None if image_type == "all" else image_type
    rows = await ctx.images.list_by_user(
        ctx.user.id,
        image_type=kind,
        project_id=project_id,
        limit=limit,
        offset=offset,
    )
    total = await ctx.images.count_by_user(ctx.user.id, image_type=kind, project_id=project_id)

    return UserImagesResponse(
        images=[
            UserImageInfo(
                **ImageInfo.model_validate(image).model_dump(),
                transformation_count=count,
            )
            for image, count in rows
        ],
        total=total,
        has_more=total > offset + limit,
    )
