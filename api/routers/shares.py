"""
Share link endpoints.

Endpoints:
- POST /api/shares - Create a share for an owned project
- GET /api/shares - List own shares
- GET /api/shares/{token} - Get own share
- PUT /api/shares/{token} - Update own share
- DELETE /api/shares/{token} - Delete own share
- GET /api/public/shares/{token} - Anonymous view (X-Share-Password header)
"""

import logging

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import RequestContext, get_request_context, require_db_session
from api.routers.variants import variant_to_info
from api.schemas.common import SuccessResponse
from api.schemas.shares import (
    CreateShareRequest,
    CreateShareResponse,
    ListSharesResponse,
    PublicProjectInfo,
    PublicShareResponse,
    ShareDetailResponse,
    ShareInfo,
    UpdateShareRequest,
)
from database.models import ProjectShare, ShareVisibility
from services.shares import ShareService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shares", tags=["shares"])
public_router = APIRouter(prefix="/public/shares", tags=["shares"])


def share_to_info(share: ProjectShare) -> ShareInfo:
    return ShareInfo(
        id=share.id,
        share_token=share.share_token,
        project_id=share.project_id,
        visibility=share.visibility,
        title=share.title,
        description=share.description,
        featured_items=share.featured_items or [],
        expires_at=share.expires_at,
        max_views=share.max_views,
        current_views=share.current_views,
        last_viewed_at=share.last_viewed_at,
        has_password=bool(share.password_hash),
        created_at=share.created_at,
    )


@router.post("", response_model=CreateShareResponse)
async def create_share(
    request: CreateShareRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    links = await ShareService(ctx.session).create(
        ctx.user.id,
        request.project_id,
        visibility=request.visibility or ShareVisibility.UNLISTED.value,
        title=request.title,
        description=request.description,
        featured_items=request.featured_items,
        expires_at=request.expires_at,
        max_views=request.max_views,
        password=request.password,
    )
    return CreateShareResponse(
        share_url=links.share_url,
        share_token=links.share.share_token,
        og_image_url=links.og_image_url,
        embed_code=links.embed_code,
    )


@router.get("", response_model=ListSharesResponse)
async def list_shares(ctx: RequestContext = Depends(get_request_context)):
    shares = await ShareService(ctx.session).list_own(ctx.user.id)
    return ListSharesResponse(shares=[share_to_info(s) for s in shares])


@router.get("/{share_token}", response_model=ShareDetailResponse)
async def get_share(
    share_token: str,
    ctx: RequestContext = Depends(get_request_context),
):
    share = await ShareService(ctx.session).get_own(ctx.user.id, share_token)
    return ShareDetailResponse(share=share_to_info(share))


@router.put("/{share_token}", response_model=ShareDetailResponse)
async def update_share(
    share_token: str,
    request: UpdateShareRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    """Apply the fields present in the body."""
    share = await ShareService(ctx.session).update_own(
        ctx.user.id,
        share_token,
        request.model_dump(exclude_unset=True),
    )
    return ShareDetailResponse(share=share_to_info(share))


@router.delete("/{share_token}", response_model=SuccessResponse)
async def delete_share(
    share_token: str,
    ctx: RequestContext = Depends(get_request_context),
):
    """Deleting a link that is already gone still succeeds."""
    await ShareService(ctx.session).delete_own(ctx.user.id, share_token)
    return SuccessResponse()


@public_router.get("/{share_token}", response_model=PublicShareResponse)
async def view_public_share(
    share_token: str,
    x_share_password: str | None = Header(default=None),
    session: AsyncSession = Depends(require_db_session),
):
    """Anonymous read of a share; counts one view."""
    view = await ShareService(session).view_public(share_token, x_share_password)
    project = view.project
    return PublicShareResponse(
        title=view.share.title,
        description=view.share.description,
        visibility=view.share.visibility,
        current_views=view.share.current_views + 1,
        project=PublicProjectInfo(
            id=project.id,
            name=project.name,
            description=project.description,
            cover_image_url=project.cover_image_url,
        ),
        items=[variant_to_info(v) for v in view.items],
    )
