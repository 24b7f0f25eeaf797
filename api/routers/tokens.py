"""
Token ledger endpoints.

Endpoints:
- GET /api/tokens/balance - Caller's counters
- GET /api/tokens - Counters plus the latest transactions
- POST /api/tokens/credit - Credit a profile (admin)
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import RequestContext, get_request_context, require_admin
from api.schemas.tokens import (
    BalanceResponse,
    CreditTokensRequest,
    CreditTokensResponse,
    TokenHistoryResponse,
    TransactionInfo,
)
from database.models import TransactionType
from database.repositories import Balance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tokens", tags=["tokens"])


def balance_to_response(balance: Balance) -> BalanceResponse:
    return BalanceResponse(
        tokens_available=balance.tokens_available,
        tokens_total_purchased=balance.tokens_total_purchased,
        tokens_total_used=balance.tokens_total_used,
    )


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(ctx: RequestContext = Depends(get_request_context)):
    return balance_to_response(await ctx.ledger.get_balance(ctx.user.id))


@router.get("", response_model=TokenHistoryResponse)
async def get_token_history(ctx: RequestContext = Depends(get_request_context)):
    """Balance together with the 20 most recent transactions."""
    balance, transactions = await ctx.ledger.history(ctx.user.id)
    return TokenHistoryResponse(
        balance=balance_to_response(balance),
        transactions=[TransactionInfo.model_validate(t) for t in transactions],
    )


@router.post("/credit", response_model=CreditTokensResponse)
async def credit_tokens(
    request: CreditTokensRequest,
    ctx: RequestContext = Depends(require_admin),
):
    """Add tokens to any profile."""
    balance = await ctx.ledger.credit(
        request.user_id,
        request.amount,
        type=TransactionType(request.type),
        description=request.description,
    )
    logger.info(f"Admin {ctx.user.id} credited {request.amount} tokens to {request.user_id}")
    return CreditTokensResponse(balance=balance_to_response(balance))
