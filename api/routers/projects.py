"""
Projects router for room staging workspaces.

Endpoints:
- GET /api/projects - List projects (optional ?status=)
- POST /api/projects - Create project
- GET /api/projects/{id} - Get project with its images
- PUT /api/projects/{id} - Update project
- DELETE /api/projects/{id} - Delete project
- POST /api/projects/{id}/upload-image - Upload a base image
- GET /api/projects/{id}/images - List base images
- GET /api/projects/{id}/variants?ids=a,b,c - Variants by id
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from api.dependencies import RequestContext, get_request_context, get_storage_provider
from api.routers.variants import variant_to_info
from api.schemas.common import SuccessResponse
from api.schemas.projects import (
    CreateProjectRequest,
    ImageInfo,
    ListImagesResponse,
    ListProjectsResponse,
    ProjectDetailResponse,
    ProjectInfo,
    ProjectResponse,
    UpdateProjectRequest,
    UploadImageResponse,
)
from api.schemas.variants import VariantListResponse
from core.exceptions import ValidationError
from services.projects import (
    build_project_updates,
    clean_description,
    clean_name,
    get_owned_project,
    upload_base_image,
)
from services.storage import StorageProvider
from services.uploads import max_upload_bytes, validate_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def parse_ids(raw: str) -> list[UUID]:
    """Parse a comma separated id list; blanks are skipped."""
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(UUID(part))
        except ValueError:
            raise ValidationError("Invalid ids parameter", details={"id": part}) from None
    return ids


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an upload without buffering more than the size limit allows.

    At most one byte past the limit is read, so oversized files still fail
    validation.
    """
    validate_upload(file.content_type, file.size or 0)
    return await file.read(max_upload_bytes() + 1)


# ============ Endpoints ============


@router.get("", response_model=ListProjectsResponse)
async def list_projects(
    status: str | None = Query(default=None, description="Filter by status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    ctx: RequestContext = Depends(get_request_context),
):
    """List projects for the current user, most recently updated first."""
    projects = await ctx.projects.list_by_user(ctx.user.id, status=status, limit=limit, offset=offset)
    return ListProjectsResponse(projects=[ProjectInfo.model_validate(p) for p in projects])


@router.post("", response_model=ProjectResponse)
async def create_project(
    request: CreateProjectRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    project = await ctx.projects.create(
        user_id=ctx.user.id,
        name=clean_name(request.name),
        description=clean_description(request.description),
    )
    logger.info(f"Created project {project.id} for user {ctx.user.id}")
    return ProjectResponse(project=ProjectInfo.model_validate(project))


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
):
    project = await get_owned_project(ctx.projects, project_id, ctx.user.id)
    images = await ctx.images.list_by_project(project.id)
    return ProjectDetailResponse(
        project=ProjectInfo.model_validate(project),
        images=[ImageInfo.model_validate(i) for i in images],
    )


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    request: UpdateProjectRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    """Update the fields present in the body."""
    project = await get_owned_project(ctx.projects, project_id, ctx.user.id)
    updates = build_project_updates(request.model_dump(exclude_unset=True))
    if updates:
        project = await ctx.projects.update(project, **updates)
    return ProjectResponse(project=ProjectInfo.model_validate(project))


@router.delete("/{project_id}", response_model=SuccessResponse)
async def delete_project(
    project_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
):
    project = await get_owned_project(ctx.projects, project_id, ctx.user.id)
    await ctx.projects.delete(project)
    logger.info(f"Deleted project {project_id}")
    return SuccessResponse(message="Proyecto eliminado")


@router.post("/{project_id}/upload-image", response_model=UploadImageResponse)
async def upload_image(
    project_id: UUID,
    file: UploadFile = File(...),
    name: str | None = Form(default=None),
    ctx: RequestContext = Depends(get_request_context),
    storage: StorageProvider = Depends(get_storage_provider),
):
    """Upload a room photo to a project."""
    data = await read_upload(file)
    image = await upload_base_image(
        ctx.projects,
        ctx.images,
        storage,
        user_id=ctx.user.id,
        project_id=project_id,
        data=data,
        content_type=file.content_type,
        filename=file.filename,
        name=name,
    )
    return UploadImageResponse(image=ImageInfo.model_validate(image))


@router.get("/{project_id}/images", response_model=ListImagesResponse)
async def list_project_images(
    project_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
):
    project = await get_owned_project(ctx.projects, project_id, ctx.user.id)
    images = await ctx.images.list_by_project(project.id)
    return ListImagesResponse(images=[ImageInfo.model_validate(i) for i in images])


@router.get("/{project_id}/variants", response_model=VariantListResponse)
async def get_project_variants(
    project_id: UUID,
    ids: str | None = Query(default=None, description="Comma separated variant ids"),
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Variants by id, restricted to the caller.

    A missing ``ids`` is a 400; an empty one returns no variants.
    """
    if ids is None:
        raise ValidationError("Missing ids parameter")

    variant_ids = parse_ids(ids)
    if not variant_ids:
        return VariantListResponse(variants=[])

    await get_owned_project(ctx.projects, project_id, ctx.user.id)
    variants = await ctx.transformations.list_by_ids_for_user(variant_ids, ctx.user.id)
    return VariantListResponse(variants=[variant_to_info(v) for v in variants])
