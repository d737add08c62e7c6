"""Unit tests for AccountRepository using a mocked AsyncSession."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sm_account.infrastructure.persistence import (
    _DEBIT_SQL,
    _LOCK_ACCOUNTS_SQL,
    AccountRepository,
)
from src.sm_common.errors import AccountNotFoundError, InsufficientFundsError


def _account_row(user_id: str = "u1", balance: int = 100, version: int = 1) -> MagicMock:
    row = MagicMock()
    row.id = "uuid-1"
    row.user_id = user_id
    row.balance = balance
    row.version = version
    row.created_at = None
    row.updated_at = None
    return row


def _tx_row(kind: str, amount: int, balance_after: int, reference_id: str | None = None) -> MagicMock:
    row = MagicMock()
    row.id = 1
    row.user_id = "u1"
    row.kind = kind
    row.amount = amount
    row.status = "COMPLETED"
    row.balance_after = balance_after
    row.reference_id = reference_id
    row.created_at = None
    return row


def _result(row: MagicMock | None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestGetAccount:
    async def test_maps_row(self, db: AsyncMock) -> None:
        db.execute.return_value = _result(_account_row(balance=4200))

        account = await AccountRepository().get_account_by_user_id(db, "u1")

        assert account is not None
        assert account.balance == 4200
        assert account.user_id == "u1"

    async def test_missing_returns_none(self, db: AsyncMock) -> None:
        db.execute.return_value = _result(None)

        assert await AccountRepository().get_account_by_user_id(db, "u1") is None


class TestLockAccounts:
    async def test_passes_sorted_ids_and_keys_by_user(self, db: AsyncMock) -> None:
        result = MagicMock()
        result.fetchall.return_value = [_account_row("a"), _account_row("b")]
        db.execute.return_value = result

        locked = await AccountRepository().lock_accounts(db, ["b", "a", "b"])

        params = db.execute.call_args.args[1]
        assert params == {"user_ids": ["a", "b"]}
        assert set(locked) == {"a", "b"}

    async def test_comma_in_user_id_is_bound_whole(self, db: AsyncMock) -> None:
        existing = {"a,b": _account_row("a,b"), "seller": _account_row("seller")}

        async def execute(sql, params):
            result = MagicMock()
            result.fetchall.return_value = [
                existing[uid] for uid in params["user_ids"] if uid in existing
            ]
            return result

        db.execute.side_effect = execute

        locked = await AccountRepository().lock_accounts(db, ["seller", "a,b"])

        assert set(locked) == {"a,b", "seller"}
        assert db.execute.call_args.args[1] == {"user_ids": ["a,b", "seller"]}

    def test_lock_sql_binds_an_array(self) -> None:
        sql = str(_LOCK_ACCOUNTS_SQL)
        assert "ANY(CAST(:user_ids AS TEXT[]))" in sql
        assert "string_to_array" not in sql
        assert "FOR UPDATE" in sql

class TestDebit:
    async def test_conditional_update_failure_reports_balance(self, db: AsyncMock) -> None:
        # debit UPDATE returns no row, follow-up SELECT shows balance 30
        db.execute.side_effect = [_result(None), _result(_account_row(balance=30))]

        with pytest.raises(InsufficientFundsError) as exc_info:
            await AccountRepository().request_withdrawal(db, "u1", 40)

        assert "30" in exc_info.value.message

    def test_debit_sql_guards_balance(self) -> None:
        assert "balance >= :amount" in str(_DEBIT_SQL)


class TestApplyTransfer:
    async def test_writes_paired_entries(self, db: AsyncMock) -> None:
        db.execute.side_effect = [
            _result(_account_row("buyer", 60)),
            _result(_tx_row("PURCHASE", 40, 60, "ord-1")),
            _result(_account_row("seller", 40)),
            _result(_tx_row("SALE", 40, 40, "ord-1")),
        ]

        transfer = await AccountRepository().apply_transfer(db, "buyer", "seller", 40, "ord-1")

        assert transfer.debit_account.balance == 60
        assert transfer.credit_account.balance == 40
        assert transfer.debit_entry.kind == "PURCHASE"
        assert transfer.credit_entry.kind == "SALE"
        assert db.execute.await_count == 4

    async def test_missing_seller_raises(self, db: AsyncMock) -> None:
        db.execute.side_effect = [
            _result(_account_row("buyer", 60)),
            _result(_tx_row("PURCHASE", 40, 60, "ord-1")),
            _result(None),
        ]

        with pytest.raises(AccountNotFoundError):
            await AccountRepository().apply_transfer(db, "buyer", "seller", 40, "ord-1")
