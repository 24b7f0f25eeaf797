"""
Image model for uploaded room photos (base images).
"""

from enum import StrEnum
from uuid import UUID, uuid4

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class ImageType(StrEnum):
    ROOM = "room"
    RESULT = "result"


class Image(Base, TimestampMixin):
    """
    A stored image belonging to a project.

    Base images are created on upload and never mutated afterwards.
    """

    __tablename__ = "images"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    project_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Owner (same as the project owner at upload time)
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    storage_key: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )

    thumbnail_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    image_type: Mapped[str] = mapped_column(
        String(20),
        default=ImageType.ROOM.value,
        server_default=ImageType.ROOM.value,
        nullable=False,
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Dimensions
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)

    size_bytes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    content_type: Mapped[str] = mapped_column(
        String(50),
        default="image/jpeg",
        nullable=False,
    )

    upload_order: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )

    is_primary: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, project_id={self.project_id}, type={self.image_type})>"


# Indexes
Index("idx_images_project_id", Image.project_id)
Index("idx_images_user_id", Image.user_id)
