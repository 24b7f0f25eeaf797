"""
Token ledger.

Reads balances and moves tokens. Debits and credits are single conditional
UPDATEs in ``TokenRepository``; this service adds the policy (what counts as
"not enough") and writes the matching transaction rows.
"""

import logging
from uuid import UUID

from core.exceptions import InsufficientTokensError, NotFoundError, ValidationError
from database.models import TokenTransaction, TransactionType
from database.repositories import Balance, TokenRepository

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20


class TokenLedger:
    """Token balance operations for one request."""

    def __init__(self, repo: TokenRepository):
        self.repo = repo

    async def get_balance(self, user_id: UUID) -> Balance:
        """Return the caller's counters; a missing profile reads as zeros."""
        balance = await self.repo.get_balance(user_id)
        return balance or Balance()

    async def ensure_available(self, user_id: UUID, amount: int) -> Balance:
        """Pre-flight check, no side effects."""
        balance = await self.get_balance(user_id)
        if balance.tokens_available < amount:
            raise InsufficientTokensError(
                details={"required": amount, "available": balance.tokens_available}
            )
        return balance

    async def debit(
        self,
        user_id: UUID,
        amount: int,
        description: str,
        transformation_id: UUID | None = None,
    ) -> Balance:
        """
        Take ``amount`` tokens or fail without writing anything.

        Raises:
            InsufficientTokensError: the conditional update matched no row
        """
        if amount <= 0:
            raise ValidationError("La cantidad de tokens debe ser positiva")

        if not await self.repo.try_debit(user_id, amount):
            logger.warning(f"Token debit of {amount} refused for user {user_id}")
            raise InsufficientTokensError()

        after = await self.get_balance(user_id)
        await self.repo.add_transaction(
            user_id=user_id,
            type=TransactionType.CONSUMPTION.value,
            amount=-amount,
            balance_before=after.tokens_available + amount,
            balance_after=after.tokens_available,
            description=description,
            transformation_id=transformation_id,
        )
        return after

    async def credit(
        self,
        user_id: UUID,
        amount: int,
        type: TransactionType = TransactionType.PURCHASE,
        description: str | None = None,
    ) -> Balance:
        """Add tokens. Only purchases count towards ``tokens_total_purchased``."""
        if amount <= 0:
            raise ValidationError("La cantidad de tokens debe ser positiva")

        purchased = type == TransactionType.PURCHASE
        if not await self.repo.credit(user_id, amount, purchased=purchased):
            raise NotFoundError("Perfil no encontrado")

        after = await self.get_balance(user_id)
        await self.repo.add_transaction(
            user_id=user_id,
            type=type.value,
            amount=amount,
            balance_before=after.tokens_available - amount,
            balance_after=after.tokens_available,
            description=description,
        )
        logger.info(f"Credited {amount} tokens ({type.value}) to user {user_id}")
        return after

    async def history(self, user_id: UUID) -> tuple[Balance, list[TokenTransaction]]:
        """Balance plus the latest transactions, newest first."""
        balance = await self.get_balance(user_id)
        transactions = await self.repo.list_recent(user_id, limit=HISTORY_LIMIT)
        return balance, transactions
