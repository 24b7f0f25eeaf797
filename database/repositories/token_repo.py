"""
Token repository: ledger counters and the transaction log.

All counter changes are single conditional UPDATE statements so that two
concurrent requests can never both spend the same token.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Profile, TokenTransaction


@dataclass
class Balance:
    """Snapshot of a profile's token counters."""

    tokens_available: int = 0
    tokens_total_purchased: int = 0
    tokens_total_used: int = 0


class TokenRepository:
    """Repository for token counters and transactions."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_balance(self, user_id: UUID) -> Balance | None:
        """Read the counters without loading the ORM object."""
        result = await self.session.execute(
            select(
                Profile.tokens_available,
                Profile.tokens_total_purchased,
                Profile.tokens_total_used,
            ).where(Profile.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return Balance(
            tokens_available=row.tokens_available or 0,
            tokens_total_purchased=row.tokens_total_purchased or 0,
            tokens_total_used=row.tokens_total_used or 0,
        )

    async def try_debit(self, user_id: UUID, amount: int) -> bool:
        """
        Atomically take ``amount`` tokens.

        Returns False when the balance is short; nothing is written then.
        """
        result = await self.session.execute(
            update(Profile)
            .where(Profile.id == user_id, Profile.tokens_available >= amount)
            .values(
                tokens_available=Profile.tokens_available - amount,
                tokens_total_used=Profile.tokens_total_used + amount,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def credit(self, user_id: UUID, amount: int, purchased: bool) -> bool:
        """Atomically add ``amount`` tokens; purchases also raise total_purchased."""
        values = {"tokens_available": Profile.tokens_available + amount}
        if purchased:
            values["tokens_total_purchased"] = Profile.tokens_total_purchased + amount

        result = await self.session.execute(
            update(Profile)
            .where(Profile.id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def add_transaction(
        self,
        user_id: UUID,
        type: str,
        amount: int,
        balance_before: int,
        balance_after: int,
        description: str | None = None,
        transformation_id: UUID | None = None,
    ) -> TokenTransaction:
        """Append a ledger entry."""
        transaction = TokenTransaction(
            user_id=user_id,
            type=type,
            amount=amount,
            balance_before=balance_before,
            balance_after=balance_after,
            description=description,
            transformation_id=transformation_id,
        )
        self.session.add(transaction)
        await self.session.flush()
        return transaction

    async def list_recent(self, user_id: UUID, limit: int = 20) -> list[TokenTransaction]:
        """Newest transactions first."""
        result = await self.session.execute(
            select(TokenTransaction)
            .where(TokenTransaction.user_id == user_id)
            .order_by(desc(TokenTransaction.created_at))
            .limit(limit)
        )
        return list(result.scalars().all())
