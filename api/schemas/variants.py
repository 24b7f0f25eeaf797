"""
Pydantic schemas for variant generation and listing.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .design import ColorPaletteInfo, DesignStyleInfo, RoomTypeInfo, SeasonalThemeInfo


class Dimensions(BaseModel):
    """Room size in meters."""

    width: float | None = Field(default=None, gt=0, le=100)
    height: float | None = Field(default=None, gt=0, le=100)


class GenerateVariantRequest(BaseModel):
    """Request body for generating a variant of a base image."""

    style_id: UUID | None = Field(default=None, description="Design style (required)")
    room_type_id: UUID | None = None
    color_scheme_id: UUID | None = Field(default=None, description="Color palette")
    custom_prompt: str | None = Field(default=None, max_length=1000)
    dimensions: Dimensions | None = None
    provider: str | None = Field(default=None, description="gemini or runware")


class VariantInfo(BaseModel):
    """One generation attempt, with its catalog entries when loaded."""

    id: UUID
    project_id: UUID
    base_image_id: UUID
    status: str
    provider: str
    prompt_used: str
    custom_instructions: str | None = None
    result_image_url: str | None = None
    error_message: str | None = None
    is_favorite: bool = False
    tokens_consumed: int = 0
    processing_time_ms: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict, description="Provider-tagged metadata")
    style: DesignStyleInfo | None = None
    room_type: RoomTypeInfo | None = None
    color_palette: ColorPaletteInfo | None = None
    seasonal_theme: SeasonalThemeInfo | None = None
    created_at: datetime
    completed_at: datetime | None = None


class GenerateVariantResponse(BaseModel):
    success: bool = True
    transformation: VariantInfo


class VariantListResponse(BaseModel):
    variants: list[VariantInfo] = Field(default_factory=list)


class FavoriteResponse(BaseModel):
    success: bool = True
    is_favorite: bool


class TransformationStatistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    completed: int = 0
    processing: int = 0
    failed: int = 0
    total_tokens_used: int = Field(default=0, serialization_alias="totalTokensUsed")


class UserTransformationsResponse(BaseModel):
    """The caller's variants across all projects, one page at a time."""

    model_config = ConfigDict(populate_by_name=True)

    transformations: list[VariantInfo] = Field(default_factory=list)
    total: int = 0
    has_more: bool = Field(default=False, serialization_alias="hasMore")
    statistics: TransformationStatistics = Field(default_factory=TransformationStatistics)
