"""
Profile model: the account record and its token counters.
"""

from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class ProfileRole(StrEnum):
    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


class AuthMethod(StrEnum):
    MAGIC_LINK = "magic_link"
    PASSWORD = "password"
    GOOGLE = "google"


class Profile(Base, TimestampMixin):
    """
    Account profile.

    Token counters follow ``tokens_available = tokens_total_purchased
    - tokens_total_used`` plus any bonus credit. The counters are only ever
    changed through single conditional UPDATE statements.
    """

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )

    full_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    role: Mapped[str] = mapped_column(
        String(20),
        default=ProfileRole.USER.value,
        server_default=ProfileRole.USER.value,
        nullable=False,
    )

    # Token ledger counters
    tokens_available: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    tokens_total_purchased: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    tokens_total_used: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )

    # How the account signs in
    auth_provider: Mapped[str] = mapped_column(
        String(20),
        default=AuthMethod.MAGIC_LINK.value,
        server_default=AuthMethod.MAGIC_LINK.value,
        nullable=False,
    )
    password_set: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    last_active_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email}, role={self.role})>"


Index("idx_profiles_email", Profile.email)
