"""
Transformation model: one AI-staged variant of a base image.
"""

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, TimestampMixin

if TYPE_CHECKING:
    from .catalog import ColorPalette, DesignStyle, RoomType, SeasonalTheme


class TransformationStatus(StrEnum):
    """
    Variant lifecycle.

    requested -> processing -> completed | failed
    """

    REQUESTED = "requested"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Transformation(Base, TimestampMixin):
    """
    A generation attempt for a base image.

    The result is immutable once the status is ``completed``; only
    ``is_favorite`` changes afterwards.
    """

    __tablename__ = "transformations"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    # Owner
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    project_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )

    base_image_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("images.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Design parameters
    style_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("design_styles.id", ondelete="SET NULL"),
        nullable=True,
    )
    room_type_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("room_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    palette_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("color_palettes.id", ondelete="SET NULL"),
        nullable=True,
    )
    seasonal_theme_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("seasonal_themes.id", ondelete="SET NULL"),
        nullable=True,
    )

    provider: Mapped[str] = mapped_column(
        String(20),
        default="gemini",
        nullable=False,
    )

    prompt_used: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    custom_instructions: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    tokens_consumed: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=TransformationStatus.REQUESTED.value,
        server_default=TransformationStatus.REQUESTED.value,
        nullable=False,
    )

    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    # Result
    result_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    processing_time_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Provider metadata, shaped by the provider tag
    generation_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSONType,
        default=dict,
        nullable=False,
    )

    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Catalog references
    style: Mapped[Optional["DesignStyle"]] = relationship("DesignStyle", lazy="raise")
    room_type: Mapped[Optional["RoomType"]] = relationship("RoomType", lazy="raise")
    color_palette: Mapped[Optional["ColorPalette"]] = relationship("ColorPalette", lazy="raise")
    seasonal_theme: Mapped[Optional["SeasonalTheme"]] = relationship("SeasonalTheme", lazy="raise")

    def __repr__(self) -> str:
        return f"<Transformation(id={self.id}, status={self.status})>"


# Indexes
Index("idx_transformations_user_id", Transformation.user_id)
Index("idx_transformations_project_id", Transformation.project_id)
Index("idx_transformations_base_image_id", Transformation.base_image_id)
Index("idx_transformations_status", Transformation.status)
