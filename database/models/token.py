"""
Token transaction log.
"""

from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class TransactionType(StrEnum):
    CONSUMPTION = "consumption"
    PURCHASE = "purchase"
    BONUS = "bonus"
    REFUND = "refund"


class TokenTransaction(Base):
    """
    Append-only record of a ledger movement.

    ``amount`` is negative for consumption.
    """

    __tablename__ = "token_transactions"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_before: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    transformation_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("transformations.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<TokenTransaction(user_id={self.user_id}, type={self.type}, amount={self.amount})>"


Index("idx_token_transactions_user_created", TokenTransaction.user_id, TokenTransaction.created_at)
