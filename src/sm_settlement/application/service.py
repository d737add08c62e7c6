"""SettlementEngine: turns a buy request into one atomic database unit.

    validate -> debit buyer -> credit seller -> unpublish listing -> insert order

Steps run inside a single transaction. Row locks are taken listing first,
then both accounts sorted by user_id, so a second settlement of the same
asset waits on the listing lock and then finds it unpublished. Any failure
rolls everything back; the caller sees the first failed condition.

After commit the gateway is told about the sale. That call is best-effort:
its failure is logged and never reverses the committed transfer.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.repository import AccountRepositoryProtocol
from src.sm_account.infrastructure.persistence import AccountRepository
from src.sm_common.enums import OrderStatus
from src.sm_common.errors import HandoffGatewayError, ListingConflictError
from src.sm_common.id_generator import generate_id
from src.sm_handoff.domain.gateway import HandoffGatewayProtocol
from src.sm_listing.domain.repository import ListingRepositoryProtocol
from src.sm_listing.infrastructure.persistence import ListingRepository
from src.sm_order.domain.models import Order
from src.sm_order.domain.repository import OrderRepositoryProtocol
from src.sm_order.infrastructure.persistence import OrderRepository
from src.sm_settlement.domain.models import SettlementRequest, SettlementResult
from src.sm_settlement.domain.rules import (
    check_accounts,
    check_funds,
    check_listing,
    check_request,
)

logger = logging.getLogger(__name__)


class SettlementEngine:
    def __init__(
        self,
        gateway: HandoffGatewayProtocol,
        accounts: AccountRepositoryProtocol | None = None,
        listings: ListingRepositoryProtocol | None = None,
        orders: OrderRepositoryProtocol | None = None,
    ) -> None:
        self._gateway = gateway
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._listings: ListingRepositoryProtocol = listings or ListingRepository()
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()

    async def settle(self, db: AsyncSession, req: SettlementRequest) -> SettlementResult:
        check_request(req)
        try:
            await self._preflight(db, req)
            result = await self._settle_locked(db, req)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Settled: order=%s asset=%s buyer=%s seller=%s price=%d",
            result.order.id, req.asset_id, req.buyer_id, req.seller_id, req.price,
        )
        await self._notify_sale(result.order)
        return result

    async def _preflight(self, db: AsyncSession, req: SettlementRequest) -> None:
        """Unlocked read: reject hopeless requests before taking any lock."""
        accounts = {}
        for user_id in (req.buyer_id, req.seller_id):
            account = await self._accounts.get_account_by_user_id(db, user_id)
            if account is not None:
                accounts[user_id] = account
        check_accounts(accounts, req)
        check_listing(await self._listings.get_active_by_asset(db, req.asset_id), req)
        check_funds(accounts[req.buyer_id], req.price)

    async def _settle_locked(
        self, db: AsyncSession, req: SettlementRequest
    ) -> SettlementResult:
        listing = await self._listings.get_active_by_asset(db, req.asset_id, for_update=True)
        accounts = await self._accounts.lock_accounts(db, [req.buyer_id, req.seller_id])

        check_accounts(accounts, req)
        listing = check_listing(listing, req)
        check_funds(accounts[req.buyer_id], req.price)

        order_id = generate_id()
        transfer = await self._accounts.apply_transfer(
            db, req.buyer_id, req.seller_id, req.price, order_id
        )

        if await self._listings.unpublish(db, listing.id) is None:
            raise ListingConflictError(req.asset_id, "already sold")

        order = await self._orders.save(
            Order(
                id=order_id,
                asset_id=req.asset_id,
                buyer_id=req.buyer_id,
                seller_id=req.seller_id,
                price=req.price,
                status=OrderStatus.PENDING.value,
            ),
            db,
        )
        return SettlementResult(
            buyer_balance=transfer.debit_account.balance,
            seller_balance=transfer.credit_account.balance,
            order=order,
        )

    async def _notify_sale(self, order: Order) -> None:
        # Fire-and-forget: no retry, no rollback
        try:
            await self._gateway.notify_sale(order)
        except HandoffGatewayError as exc:
            logger.warning(
                "Sale notification failed: order=%s asset=%s: %s",
                order.id, order.asset_id, exc.message,
            )
