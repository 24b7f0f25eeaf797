"""
Project share links.
"""

from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONType, TimestampMixin


class ShareVisibility(StrEnum):
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


class ProjectShare(Base, TimestampMixin):
    """
    Shareable link to a project.

    Management is always scoped by ``(share_token, created_by)``; the public
    read path is separate and never mutates anything but the view counters.
    """

    __tablename__ = "project_shares"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    share_token: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
    )

    created_by: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    project_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )

    visibility: Mapped[str] = mapped_column(
        String(20),
        default=ShareVisibility.UNLISTED.value,
        nullable=False,
    )

    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Transformation ids to feature, in display order
    featured_items: Mapped[list] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )

    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    max_views: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_views: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    last_viewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # SHA-256 hex digest, None when the share is not password protected
    password_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<ProjectShare(token={self.share_token}, project_id={self.project_id})>"


Index("idx_project_shares_created_by", ProjectShare.created_by)
Index("idx_project_shares_project_id", ProjectShare.project_id)
