"""Pydantic schemas for sm_account API."""

from pydantic import BaseModel, Field

from src.sm_account.domain.models import AccountTransaction
from src.sm_common.cents import cents_to_display
from src.sm_common.datetime_utils import to_iso

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="External identity (Steam ID)")
    amount_cents: int = Field(..., gt=0, description="Amount to deposit in cents")


class WithdrawRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="External identity (Steam ID)")
    amount_cents: int = Field(..., gt=0, description="Amount to withdraw in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionItem(BaseModel):
    id: int
    kind: str
    amount_cents: int
    amount_display: str
    status: str
    balance_after_cents: int
    reference_id: str | None
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, entry: AccountTransaction) -> "TransactionItem":
        return cls(
            id=entry.id,
            kind=entry.kind,
            amount_cents=entry.amount,
            amount_display=cents_to_display(entry.amount),
            status=entry.status,
            balance_after_cents=entry.balance_after,
            reference_id=entry.reference_id,
            created_at=to_iso(entry.created_at),
        )


class BalanceResponse(BaseModel):
    user_id: str
    balance_cents: int
    balance_display: str
    transactions: list[TransactionItem]


class DepositResponse(BaseModel):
    message: str = "Deposit successful"
    balance_cents: int
    balance_display: str
    deposited_cents: int
    transaction_id: int

    @classmethod
    def from_result(cls, balance: int, amount: int, entry_id: int) -> "DepositResponse":
        return cls(
            balance_cents=balance,
            balance_display=cents_to_display(balance),
            deposited_cents=amount,
            transaction_id=entry_id,
        )


class WithdrawResponse(BaseModel):
    message: str = "Withdrawal requested"
    balance_cents: int
    balance_display: str
    withdrawn_cents: int
    transaction_id: int
    transaction_status: str

    @classmethod
    def from_result(
        cls, balance: int, amount: int, entry: AccountTransaction
    ) -> "WithdrawResponse":
        return cls(
            balance_cents=balance,
            balance_display=cents_to_display(balance),
            withdrawn_cents=amount,
            transaction_id=entry.id,
            transaction_status=entry.status,
        )
