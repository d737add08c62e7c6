"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows means a business constraint was violated (insufficient
funds or a missing account).

Transaction ownership: The CALLER (application service or settlement engine)
is responsible for starting and committing the transaction.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import Account, AccountTransaction, TransferResult
from src.sm_common.enums import TransactionKind, TransactionStatus
from src.sm_common.errors import AccountNotFoundError, InsufficientFundsError, InternalError

# ---------------------------------------------------------------------------
# SQL: accounts
# ---------------------------------------------------------------------------

_ACCOUNT_COLUMNS = "id, user_id, balance, version, created_at, updated_at"

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE user_id = :user_id
""")

_INSERT_ACCOUNT_IF_ABSENT_SQL = text("""
    INSERT INTO accounts (user_id)
    VALUES (:user_id)
    ON CONFLICT (user_id) DO NOTHING
""")

# Sorted lock order keeps concurrent settlements deadlock-free
_LOCK_ACCOUNTS_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE user_id = ANY(CAST(:user_ids AS TEXT[]))
    ORDER BY user_id
    FOR UPDATE
""")

_CREDIT_SQL = text(f"""
    UPDATE accounts
    SET balance = balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING {_ACCOUNT_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE accounts
    SET balance = balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND balance >= :amount
    RETURNING {_ACCOUNT_COLUMNS}
""")

# ---------------------------------------------------------------------------
# SQL: account_transactions (append-only)
# ---------------------------------------------------------------------------

_TX_COLUMNS = "id, user_id, kind, amount, status, balance_after, reference_id, created_at"

_INSERT_TX_SQL = text(f"""
    INSERT INTO account_transactions
        (user_id, kind, amount, status, balance_after, reference_id)
    VALUES
        (:user_id, :kind, :amount, :status, :balance_after, :reference_id)
    RETURNING {_TX_COLUMNS}
""")

_LIST_TX_SQL = text(f"""
    SELECT {_TX_COLUMNS}
    FROM account_transactions
    WHERE user_id = :user_id
    ORDER BY id ASC
""")


def _row_to_account(row: Any) -> Account:
    return Account(
        id=str(row.id),
        user_id=row.user_id,
        balance=row.balance,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_tx(row: Any) -> AccountTransaction:
    return AccountTransaction(
        id=row.id,
        user_id=row.user_id,
        kind=row.kind,
        amount=row.amount,
        status=row.status,
        balance_after=row.balance_after,
        reference_id=row.reference_id,
        created_at=row.created_at,
    )


class AccountRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def get_or_create_account(
        self, db: AsyncSession, user_id: str
    ) -> Account:
        """Upsert-free get-or-create: new accounts start at balance 0, no history."""
        await db.execute(_INSERT_ACCOUNT_IF_ABSENT_SQL, {"user_id": user_id})
        account = await self.get_account_by_user_id(db, user_id)
        if account is None:
            raise InternalError(f"Account row missing after insert for user {user_id}")
        return account

    async def lock_accounts(
        self, db: AsyncSession, user_ids: list[str]
    ) -> dict[str, Account]:
        """SELECT ... FOR UPDATE on every existing account in user_ids."""
        result = await db.execute(
            _LOCK_ACCOUNTS_SQL, {"user_ids": sorted(set(user_ids))}
        )
        return {row.user_id: _row_to_account(row) for row in result.fetchall()}

    async def _append(
        self,
        db: AsyncSession,
        account: Account,
        kind: TransactionKind,
        amount: int,
        status: TransactionStatus,
        reference_id: str | None = None,
    ) -> AccountTransaction:
        result = await db.execute(
            _INSERT_TX_SQL,
            {
                "user_id": account.user_id,
                "kind": kind.value,
                "amount": amount,
                "status": status.value,
                "balance_after": account.balance,
                "reference_id": reference_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_tx(row)

    async def _debit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.get_account_by_user_id(db, user_id)
            raise InsufficientFundsError(amount, current.balance if current else 0)
        return _row_to_account(row)

    async def _credit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise AccountNotFoundError(user_id)
        return _row_to_account(row)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, AccountTransaction]:
        await self.get_or_create_account(db, user_id)
        account = await self._credit(db, user_id, amount)
        entry = await self._append(
            db, account, TransactionKind.DEPOSIT, amount, TransactionStatus.COMPLETED
        )
        return account, entry

    async def request_withdrawal(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, AccountTransaction]:
        # Funds leave the balance now; the entry stays PENDING until manual approval
        account = await self._debit(db, user_id, amount)
        entry = await self._append(
            db, account, TransactionKind.WITHDRAWAL, amount, TransactionStatus.PENDING
        )
        return account, entry

    async def apply_transfer(
        self,
        db: AsyncSession,
        debit_user_id: str,
        credit_user_id: str,
        amount: int,
        reference_id: str,
    ) -> TransferResult:
        debit_account = await self._debit(db, debit_user_id, amount)
        debit_entry = await self._append(
            db,
            debit_account,
            TransactionKind.PURCHASE,
            amount,
            TransactionStatus.COMPLETED,
            reference_id,
        )
        credit_account = await self._credit(db, credit_user_id, amount)
        credit_entry = await self._append(
            db,
            credit_account,
            TransactionKind.SALE,
            amount,
            TransactionStatus.COMPLETED,
            reference_id,
        )
        return TransferResult(
            debit_account=debit_account,
            credit_account=credit_account,
            debit_entry=debit_entry,
            credit_entry=credit_entry,
        )

    async def list_transactions(
        self, db: AsyncSession, user_id: str
    ) -> list[AccountTransaction]:
        result = await db.execute(_LIST_TX_SQL, {"user_id": user_id})
        return [_row_to_tx(row) for row in result.fetchall()]
