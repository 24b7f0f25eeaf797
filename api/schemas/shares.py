"""
Pydantic schemas for share links.

Request bodies accept both the camelCase keys used by the web client and
snake_case.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .variants import VariantInfo

Visibility = Literal["public", "unlisted", "private"]


class ShareConfig(BaseModel):
    """Settable share fields."""

    model_config = ConfigDict(populate_by_name=True)

    visibility: Visibility | None = None
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    featured_items: list[UUID] | None = Field(default=None, alias="featured")
    expires_at: datetime | None = Field(default=None, alias="expiresAt")
    max_views: int | None = Field(default=None, gt=0, alias="maxViews")
    password: str | None = Field(default=None, min_length=1, max_length=128)


class CreateShareRequest(ShareConfig):
    project_id: UUID = Field(..., alias="projectId")


class UpdateShareRequest(ShareConfig):
    pass


class CreateShareResponse(BaseModel):
    """Links handed back to the creator."""

    model_config = ConfigDict(populate_by_name=True)

    share_url: str = Field(..., serialization_alias="shareUrl")
    share_token: str = Field(..., serialization_alias="shareToken")
    og_image_url: str = Field(..., serialization_alias="ogImageUrl")
    embed_code: str = Field(..., serialization_alias="embedCode")


class ShareInfo(BaseModel):
    """Share as seen by its creator."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    share_token: str
    project_id: UUID
    visibility: str
    title: str | None = None
    description: str | None = None
    featured_items: list[str] = Field(default_factory=list)
    expires_at: datetime | None = None
    max_views: int | None = None
    current_views: int = 0
    last_viewed_at: datetime | None = None
    has_password: bool = False
    created_at: datetime


class ListSharesResponse(BaseModel):
    shares: list[ShareInfo] = Field(default_factory=list)


class ShareDetailResponse(BaseModel):
    share: ShareInfo


class PublicProjectInfo(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    cover_image_url: str | None = None


class PublicShareResponse(BaseModel):
    """What an anonymous viewer sees."""

    title: str | None = None
    description: str | None = None
    visibility: str
    current_views: int
    project: PublicProjectInfo
    items: list[VariantInfo] = Field(default_factory=list)
