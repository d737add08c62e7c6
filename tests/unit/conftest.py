"""In-memory stand-ins for the stores.

FakeSession mimics the commit/rollback contract of AsyncSession: repositories
write to ``store.working`` and rollback restores the last committed snapshot,
so all-or-nothing behaviour of the services can be asserted without PostgreSQL.
"""
import copy
import dataclasses
import itertools
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.sm_account.domain.models import Account, AccountTransaction, TransferResult
from src.sm_common.errors import AccountNotFoundError, InsufficientFundsError
from src.sm_inventory.domain.models import TradeBannedItem
from src.sm_listing.domain.models import Listing
from src.sm_order.domain.models import Order


@dataclass
class _State:
    accounts: dict[str, Account] = field(default_factory=dict)
    transactions: list[AccountTransaction] = field(default_factory=list)
    listings: dict[str, Listing] = field(default_factory=dict)
    orders: dict[str, Order] = field(default_factory=dict)
    trade_bans: dict[str, TradeBannedItem] = field(default_factory=dict)


class FakeStore:
    def __init__(self) -> None:
        self.committed = _State()
        self.working = _State()
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)

    # -- helpers for arranging and asserting committed state -----------------

    def seed_account(self, user_id: str, balance: int) -> None:
        self.working.accounts[user_id] = Account(
            id=f"acc-{user_id}", user_id=user_id, balance=balance, version=0
        )
        if balance:
            self.working.transactions.append(
                AccountTransaction(
                    id=self.next_id(), user_id=user_id, kind="DEPOSIT", amount=balance,
                    status="COMPLETED", balance_after=balance,
                )
            )
        self.committed = copy.deepcopy(self.working)

    def seed_listing(self, owner_id: str, asset_id: str, price: int) -> Listing:
        listing = Listing(
            id=f"lst-{self.next_id()}", owner_id=owner_id, asset_id=asset_id,
            name="AK-47 | Redline", image_url="https://img/ak.png", price=price,
        )
        self.working.listings[listing.id] = listing
        self.committed = copy.deepcopy(self.working)
        return listing

    def balance(self, user_id: str) -> int:
        return self.committed.accounts[user_id].balance

    def history(self, user_id: str) -> list[AccountTransaction]:
        return [t for t in self.committed.transactions if t.user_id == user_id]

    def active_listing(self, asset_id: str) -> Listing | None:
        for listing in self.committed.listings.values():
            if listing.asset_id == asset_id and listing.published:
                return listing
        return None

    def conservation_gap(self) -> int:
        """held - net deposits; zero when the ledger is conserved."""
        state = self.committed

        def total(kind: str, status: str) -> int:
            return sum(
                t.amount for t in state.transactions if t.kind == kind and t.status == status
            )

        held = sum(a.balance for a in state.accounts.values()) + total("WITHDRAWAL", "PENDING")
        net = total("DEPOSIT", "COMPLETED") - total("WITHDRAWAL", "COMPLETED")
        return held - net


class FakeSession:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.store.committed = copy.deepcopy(self.store.working)
        self.commits += 1

    async def rollback(self) -> None:
        self.store.working = copy.deepcopy(self.store.committed)
        self.rollbacks += 1


class FakeAccountRepository:
    def __init__(self) -> None:
        # user ids whose account disappears right before being credited
        self.vanish_on_credit: set[str] = set()

    async def get_account_by_user_id(self, db: Any, user_id: str) -> Account | None:
        account = db.store.working.accounts.get(user_id)
        return dataclasses.replace(account) if account else None

    async def get_or_create_account(self, db: Any, user_id: str) -> Account:
        accounts = db.store.working.accounts
        if user_id not in accounts:
            accounts[user_id] = Account(
                id=f"acc-{user_id}", user_id=user_id, balance=0, version=0
            )
        return dataclasses.replace(accounts[user_id])

    async def lock_accounts(self, db: Any, user_ids: list[str]) -> dict[str, Account]:
        accounts = db.store.working.accounts
        return {u: dataclasses.replace(accounts[u]) for u in sorted(set(user_ids)) if u in accounts}

    def _append(
        self, db: Any, account: Account, kind: str, amount: int, status: str,
        reference_id: str | None = None,
    ) -> AccountTransaction:
        entry = AccountTransaction(
            id=db.store.next_id(), user_id=account.user_id, kind=kind, amount=amount,
            status=status, balance_after=account.balance, reference_id=reference_id,
        )
        db.store.working.transactions.append(entry)
        return entry

    def _debit(self, db: Any, user_id: str, amount: int) -> Account:
        account = db.store.working.accounts.get(user_id)
        if account is None or account.balance < amount:
            raise InsufficientFundsError(amount, account.balance if account else 0)
        account.balance -= amount
        account.version += 1
        return dataclasses.replace(account)

    def _credit(self, db: Any, user_id: str, amount: int) -> Account:
        if user_id in self.vanish_on_credit:
            db.store.working.accounts.pop(user_id, None)
        account = db.store.working.accounts.get(user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        account.balance += amount
        account.version += 1
        return dataclasses.replace(account)

    async def deposit(self, db: Any, user_id: str, amount: int):  # type: ignore[no-untyped-def]
        await self.get_or_create_account(db, user_id)
        account = self._credit(db, user_id, amount)
        return account, self._append(db, account, "DEPOSIT", amount, "COMPLETED")

    async def request_withdrawal(self, db: Any, user_id: str, amount: int):  # type: ignore[no-untyped-def]
        account = self._debit(db, user_id, amount)
        return account, self._append(db, account, "WITHDRAWAL", amount, "PENDING")

    async def apply_transfer(
        self, db: Any, debit_user_id: str, credit_user_id: str, amount: int, reference_id: str
    ) -> TransferResult:
        debit = self._debit(db, debit_user_id, amount)
        debit_entry = self._append(db, debit, "PURCHASE", amount, "COMPLETED", reference_id)
        credit = self._credit(db, credit_user_id, amount)
        credit_entry = self._append(db, credit, "SALE", amount, "COMPLETED", reference_id)
        return TransferResult(debit, credit, debit_entry, credit_entry)

    async def list_transactions(self, db: Any, user_id: str) -> list[AccountTransaction]:
        return [t for t in db.store.working.transactions if t.user_id == user_id]


class FakeListingRepository:
    async def get_active_by_asset(
        self, db: Any, asset_id: str, for_update: bool = False
    ) -> Listing | None:
        for listing in db.store.working.listings.values():
            if listing.asset_id == asset_id and listing.published:
                return dataclasses.replace(listing)
        return None

    async def insert(self, db: Any, owner_id: str, asset_id: str, name: str,
                     image_url: str, price: int) -> Listing:
        listing = Listing(
            id=f"lst-{db.store.next_id()}", owner_id=owner_id, asset_id=asset_id,
            name=name, image_url=image_url, price=price,
        )
        db.store.working.listings[listing.id] = listing
        return dataclasses.replace(listing)

    async def update_price(self, db: Any, asset_id: str, price: int) -> Listing | None:
        listing = await self.get_active_by_asset(db, asset_id)
        if listing is None:
            return None
        db.store.working.listings[listing.id].price = price
        return dataclasses.replace(db.store.working.listings[listing.id])

    async def delete_active(self, db: Any, asset_id: str) -> bool:
        listing = await self.get_active_by_asset(db, asset_id)
        if listing is None:
            return False
        del db.store.working.listings[listing.id]
        return True

    async def unpublish(self, db: Any, listing_id: str) -> Listing | None:
        listing = db.store.working.listings.get(listing_id)
        if listing is None or not listing.published:
            return None
        listing.published = False
        return dataclasses.replace(listing)

    async def list_active(self, db: Any, owner_id: str | None = None) -> list[Listing]:
        return [
            dataclasses.replace(x)
            for x in db.store.working.listings.values()
            if x.published and (owner_id is None or x.owner_id == owner_id)
        ]


class FakeOrderRepository:
    async def save(self, order: Order, db: Any) -> Order:
        db.store.working.orders[order.id] = dataclasses.replace(order)
        return dataclasses.replace(order)

    async def get_by_id(self, order_id: str, db: Any) -> Order | None:
        order = db.store.working.orders.get(order_id)
        return dataclasses.replace(order) if order else None

    async def list_by_party(self, user_id: str, db: Any) -> list[Order]:
        return [
            dataclasses.replace(o) for o in db.store.working.orders.values() if o.is_party(user_id)
        ]

    async def transition(
        self, order_id: str, from_status: str, to_status: str, db: Any
    ) -> Order | None:
        order = db.store.working.orders.get(order_id)
        if order is None or order.status != from_status:
            return None
        order.status = to_status
        return dataclasses.replace(order)

    async def lock_unoffered(self, order_id: str, db: Any) -> Order | None:
        order = db.store.working.orders.get(order_id)
        if order is None or order.status != "WAITING_CONFIRMATION" or order.trade_offer_id:
            return None
        return dataclasses.replace(order)

    async def set_trade_offer_id(self, order_id: str, trade_offer_id: str, db: Any) -> None:
        db.store.working.orders[order_id].trade_offer_id = trade_offer_id


class FakeTradeBanRepository:
    async def record_many(self, db: Any, items: list[TradeBannedItem]) -> None:
        for item in items:
            db.store.working.trade_bans.setdefault(item.asset_id, dataclasses.replace(item))

    async def list_for_owner(self, db: Any, steam_id: str) -> list[TradeBannedItem]:
        return [
            dataclasses.replace(b)
            for b in db.store.working.trade_bans.values()
            if b.steam_id == steam_id
        ]

    async def get_active(self, db: Any, asset_id: str) -> TradeBannedItem | None:
        ban = db.store.working.trade_bans.get(asset_id)
        if ban is None or not ban.is_active(datetime.now(UTC)):
            return None
        return dataclasses.replace(ban)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def session(store: FakeStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def account_repo() -> FakeAccountRepository:
    return FakeAccountRepository()


@pytest.fixture
def listing_repo() -> FakeListingRepository:
    return FakeListingRepository()


@pytest.fixture
def order_repo() -> FakeOrderRepository:
    return FakeOrderRepository()


@pytest.fixture
def trade_ban_repo() -> FakeTradeBanRepository:
    return FakeTradeBanRepository()


@pytest.fixture
def gateway() -> AsyncMock:
    gw = AsyncMock()
    gw.create_offer.return_value = "5512345678"
    return gw
