"""Domain models for sm_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Account:
    id: str
    user_id: str             # external identity (Steam ID)
    balance: int             # cents, never negative
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class AccountTransaction:
    id: int                          # BIGSERIAL, per-account chronological order
    user_id: str
    kind: str                        # TransactionKind value
    amount: int                      # cents, always positive
    status: str                      # TransactionStatus value
    balance_after: int               # cents, balance snapshot after op
    reference_id: str | None = None  # order id for PURCHASE / SALE
    created_at: datetime | None = None


@dataclass
class TransferResult:
    """Both sides of a settlement transfer, as written inside one transaction."""

    debit_account: Account
    credit_account: Account
    debit_entry: AccountTransaction
    credit_entry: AccountTransaction
