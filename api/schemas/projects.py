"""
Pydantic schemas for projects API.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProjectInfo(BaseModel):
    """Project information."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Project ID")
    name: str = Field(..., description="Project name")
    description: str | None = Field(None, description="Project description")
    status: str = Field(..., description="active, completed or archived")
    is_public: bool = Field(default=False, description="Whether project is public")
    cover_image_url: str | None = Field(None, description="Cover image URL")
    total_transformations: int = Field(default=0, description="Completed variants")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class ImageInfo(BaseModel):
    """Uploaded base image."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    url: str
    thumbnail_url: str | None = None
    image_type: str
    name: str | None = None
    width: int | None = None
    height: int | None = None
    size_bytes: int | None = None
    content_type: str | None = None
    upload_order: int = 0
    is_primary: bool = False
    created_at: datetime


# ============ Request/Response Schemas ============


class CreateProjectRequest(BaseModel):
    """
    Request for creating a project.

    Name rules are enforced by the service so the messages match the
    update endpoint.
    """

    name: str | None = None
    description: str | None = None


class UpdateProjectRequest(BaseModel):
    """Fields left out of the body are not touched."""

    name: str | None = None
    description: str | None = None
    status: str | None = None
    is_public: bool | None = None


class ProjectResponse(BaseModel):
    success: bool = True
    project: ProjectInfo


class ListProjectsResponse(BaseModel):
    projects: list[ProjectInfo] = Field(default_factory=list)


class ProjectDetailResponse(BaseModel):
    """Project with its base images."""

    project: ProjectInfo
    images: list[ImageInfo] = Field(default_factory=list)


class ListImagesResponse(BaseModel):
    images: list[ImageInfo] = Field(default_factory=list)


class UploadImageResponse(BaseModel):
    success: bool = True
    image: ImageInfo


class ImageDetailResponse(BaseModel):
    success: bool = True
    image: ImageInfo


class UserImageInfo(ImageInfo):
    """Gallery entry: an image with how many variants were generated from it."""

    transformation_count: int = 0


class UserImagesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    images: list[UserImageInfo] = Field(default_factory=list)
    total: int = 0
    has_more: bool = Field(default=False, serialization_alias="hasMore")
