"""AccountApplicationService: thin composition layer over the ledger store.

Every operation here writes (get_balance may create the account lazily), so
each one commits on success and rolls back on any error.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.application.schemas import (
    BalanceResponse,
    DepositResponse,
    TransactionItem,
    WithdrawResponse,
)
from src.sm_account.domain.repository import AccountRepositoryProtocol
from src.sm_account.infrastructure.persistence import AccountRepository
from src.sm_common.cents import cents_to_display, validate_amount
from src.sm_common.errors import InvalidRequestError


def _check_amount(amount_cents: int) -> None:
    try:
        validate_amount(amount_cents, "amount_cents")
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from None


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        try:
            account = await self._repo.get_or_create_account(db, user_id)
            entries = await self._repo.list_transactions(db, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BalanceResponse(
            user_id=user_id,
            balance_cents=account.balance,
            balance_display=cents_to_display(account.balance),
            transactions=[TransactionItem.from_domain(e) for e in entries],
        )

    async def deposit(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> DepositResponse:
        _check_amount(amount_cents)
        try:
            account, entry = await self._repo.deposit(db, user_id, amount_cents)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return DepositResponse.from_result(
            balance=account.balance,
            amount=amount_cents,
            entry_id=entry.id,
        )

    async def request_withdrawal(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> WithdrawResponse:
        _check_amount(amount_cents)
        try:
            account, entry = await self._repo.request_withdrawal(db, user_id, amount_cents)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return WithdrawResponse.from_result(
            balance=account.balance,
            amount=amount_cents,
            entry=entry,
        )
