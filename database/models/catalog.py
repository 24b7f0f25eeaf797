"""
Design catalog models: styles, room types, color palettes and seasonal themes.
"""

from uuid import UUID, uuid4

from sqlalchemy import Boolean, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONType, TimestampMixin


class CatalogMixin:
    """Columns shared by every catalog table."""

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class DesignStyle(Base, CatalogMixin, TimestampMixin):
    __tablename__ = "design_styles"

    # Prompt fragment the staging prompt starts from
    base_prompt: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<DesignStyle(code={self.code})>"


class RoomType(Base, CatalogMixin, TimestampMixin):
    __tablename__ = "room_types"

    def __repr__(self) -> str:
        return f"<RoomType(code={self.code})>"


class ColorPalette(Base, CatalogMixin, TimestampMixin):
    __tablename__ = "color_palettes"

    # ["#F5F5DC", "#8B7355", ...]
    primary_colors: Mapped[list] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ColorPalette(code={self.code})>"


class SeasonalTheme(Base, CatalogMixin, TimestampMixin):
    __tablename__ = "seasonal_themes"

    def __repr__(self) -> str:
        return f"<SeasonalTheme(code={self.code})>"
