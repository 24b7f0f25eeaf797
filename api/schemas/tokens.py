"""
Pydantic schemas for the token ledger API.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BalanceResponse(BaseModel):
    """Caller's token counters."""

    tokens_available: int = 0
    tokens_total_purchased: int = 0
    tokens_total_used: int = 0


class TransactionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str
    amount: int
    balance_before: int | None = None
    balance_after: int | None = None
    description: str | None = None
    transformation_id: UUID | None = None
    created_at: datetime


class TokenHistoryResponse(BaseModel):
    """Balance plus the most recent transactions, newest first."""

    balance: BalanceResponse
    transactions: list[TransactionInfo] = Field(default_factory=list)


class CreditTokensRequest(BaseModel):
    """Admin credit to a profile."""

    user_id: UUID = Field(..., description="Profile to credit")
    amount: int = Field(..., gt=0, le=10000, description="Tokens to add")
    type: str = Field(default="purchase", pattern="^(purchase|bonus|refund)$")
    description: str | None = Field(default=None, max_length=500)


class CreditTokensResponse(BaseModel):
    success: bool = True
    balance: BalanceResponse
