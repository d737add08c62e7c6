"""Order lifecycle manager.

    PENDING --confirm--> WAITING_CONFIRMATION --complete--> COMPLETED
    PENDING --cancel (buyer or seller)--> CANCELED

Each transition is a conditional UPDATE, so of two concurrent confirms only
one performs the transition and only that one calls the hand-off gateway.
Repeating a transition that already happened is a no-op (changed=False).

Confirm holds the order row while it asks the gateway for a trade offer and
commits the transition together with the offer id. A gateway failure does not
undo the transition: the order stays WAITING_CONFIRMATION without an offer,
the response carries handoff_error, and no funds move. Confirming such an
order again retries the offer; once an offer id is recorded, confirm is a
no-op.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.enums import OrderStatus
from src.sm_common.errors import (
    HandoffGatewayError,
    InvalidRequestError,
    OrderNotFoundError,
    OrderStateConflictError,
)
from src.sm_handoff.domain.gateway import HandoffGatewayProtocol
from src.sm_order.application.schemas import (
    OrderActionResponse,
    OrderListResponse,
    OrderResponse,
)
from src.sm_order.domain.models import Order
from src.sm_order.domain.repository import OrderRepositoryProtocol
from src.sm_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)

_PENDING = OrderStatus.PENDING.value
_WAITING = OrderStatus.WAITING_CONFIRMATION.value
_COMPLETED = OrderStatus.COMPLETED.value
_CANCELED = OrderStatus.CANCELED.value


def _action(
    message: str, changed: bool, order: Order, handoff_error: str | None = None
) -> OrderActionResponse:
    return OrderActionResponse(
        message=message,
        changed=changed,
        order=OrderResponse.from_domain(order),
        handoff_error=handoff_error,
    )


class OrderLifecycleService:
    def __init__(
        self,
        gateway: HandoffGatewayProtocol,
        repo: OrderRepositoryProtocol | None = None,
    ) -> None:
        self._gateway = gateway
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()

    async def _transition(
        self,
        order_id: str,
        from_status: str,
        to_status: str,
        already_done: tuple[str, ...],
        action: str,
        db: AsyncSession,
    ) -> tuple[Order, bool]:
        """Apply one transition. Returns (order, changed)."""
        try:
            order = await self._repo.transition(order_id, from_status, to_status, db)
            if order is not None:
                await db.commit()
                return order, True
            current = await self._repo.get_by_id(order_id, db)
            await db.rollback()
        except Exception:
            await db.rollback()
            raise
        if current is None:
            raise OrderNotFoundError(order_id)
        if current.status in already_done:
            return current, False
        raise OrderStateConflictError(order_id, current.status, action)

    async def confirm(self, order_id: str, db: AsyncSession) -> OrderActionResponse:
        try:
            order = await self._repo.transition(order_id, _PENDING, _WAITING, db)
            retry = order is None
            if retry:
                order = await self._repo.lock_unoffered(order_id, db)
            if order is None:
                current = await self._repo.get_by_id(order_id, db)
                await db.rollback()
            else:
                handoff_error = await self._request_offer(order, db)
                await self._commit_offer(order, db)
        except Exception:
            await db.rollback()
            raise

        if order is None:
            if current is None:
                raise OrderNotFoundError(order_id)
            if current.status not in (_WAITING, _COMPLETED):
                raise OrderStateConflictError(order_id, current.status, "confirmed")
            logger.info("Confirm no-op: order=%s already %s", order_id, current.status)
            return _action("Order already confirmed", False, current)

        message = "Trade offer retried" if retry else "Order confirmed"
        return _action(message, True, order, handoff_error)

    async def _request_offer(self, order: Order, db: AsyncSession) -> str | None:
        """Ask the gateway for a trade offer. Returns the failure message, if any."""
        try:
            trade_offer_id = await self._gateway.create_offer(order)
        except HandoffGatewayError as exc:
            logger.warning(
                "Trade offer failed: order=%s stays %s: %s",
                order.id, order.status, exc.message,
            )
            return exc.message
        await self._repo.set_trade_offer_id(order.id, trade_offer_id, db)
        order.trade_offer_id = trade_offer_id
        return None

    async def _commit_offer(self, order: Order, db: AsyncSession) -> None:
        try:
            await db.commit()
        except SQLAlchemyError:
            if order.trade_offer_id:
                logger.exception(
                    "Trade offer %s sent but order %s not updated",
                    order.trade_offer_id, order.id,
                )
            raise

    async def complete(self, order_id: str, db: AsyncSession) -> OrderActionResponse:
        order, changed = await self._transition(
            order_id, _WAITING, _COMPLETED, (_COMPLETED,), "completed", db
        )
        message = "Order completed" if changed else "Order already completed"
        return _action(message, changed, order)

    async def cancel(
        self, order_id: str, actor_id: str, db: AsyncSession
    ) -> OrderActionResponse:
        existing = await self._repo.get_by_id(order_id, db)
        if existing is None:
            raise OrderNotFoundError(order_id)
        if not existing.is_party(actor_id):
            raise InvalidRequestError("only the buyer or seller can cancel an order")

        order, changed = await self._transition(
            order_id, _PENDING, _CANCELED, (_CANCELED,), "canceled", db
        )
        if changed:
            # No refund path: settled funds stay with the seller
            logger.warning(
                "Order canceled: order=%s by=%s price=%d, funds not refunded",
                order.id, actor_id, order.price,
            )
            return _action("Order canceled", True, order)
        return _action("Order already canceled", False, order)

    async def list_for_user(self, user_id: str, db: AsyncSession) -> OrderListResponse:
        orders = await self._repo.list_by_party(user_id, db)
        return OrderListResponse(orders=[OrderResponse.from_domain(o) for o in orders])
