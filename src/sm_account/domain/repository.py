"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import Account, AccountTransaction, TransferResult


class AccountRepositoryProtocol(Protocol):
    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None: ...

    async def get_or_create_account(
        self, db: AsyncSession, user_id: str
    ) -> Account: ...

    async def lock_accounts(
        self, db: AsyncSession, user_ids: list[str]
    ) -> dict[str, Account]: ...

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, AccountTransaction]: ...

    async def request_withdrawal(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, AccountTransaction]: ...

    async def apply_transfer(
        self,
        db: AsyncSession,
        debit_user_id: str,
        credit_user_id: str,
        amount: int,
        reference_id: str,
    ) -> TransferResult: ...

    async def list_transactions(
        self, db: AsyncSession, user_id: str
    ) -> list[AccountTransaction]: ...
