"""OrderRepository: raw SQL persistence implementation."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.enums import OrderStatus
from src.sm_common.errors import InternalError
from src.sm_order.domain.models import Order, can_transition

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, asset_id, buyer_id, seller_id, price, status,
    trade_offer_id, created_at, updated_at
"""

_INSERT_ORDER_SQL = text(f"""
    INSERT INTO orders (id, asset_id, buyer_id, seller_id, price, status)
    VALUES (:id, :asset_id, :buyer_id, :seller_id, :price, :status)
    RETURNING {_SELECT_COLUMNS}
""")

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = :id
""")

_LIST_BY_PARTY_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE buyer_id = :user_id OR seller_id = :user_id
    ORDER BY created_at DESC, id DESC
""")

# Conditional update: only one caller wins a given transition
_TRANSITION_SQL = text(f"""
    UPDATE orders
    SET status = :to_status, updated_at = NOW()
    WHERE id = :id AND status = :from_status
    RETURNING {_SELECT_COLUMNS}
""")

_SET_TRADE_OFFER_SQL = text("""
    UPDATE orders
    SET trade_offer_id = :trade_offer_id, updated_at = NOW()
    WHERE id = :id
""")

# Confirmed order whose trade offer never went through; a row held by another
# confirm is skipped rather than waited on
_LOCK_UNOFFERED_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE id = :id AND status = :status AND trade_offer_id IS NULL
    FOR UPDATE SKIP LOCKED
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=row.id,
        asset_id=row.asset_id,
        buyer_id=row.buyer_id,
        seller_id=row.seller_id,
        price=row.price,
        status=row.status,
        trade_offer_id=row.trade_offer_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, order: Order, db: AsyncSession) -> Order:
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "asset_id": order.asset_id,
                "buyer_id": order.buyer_id,
                "seller_id": order.seller_id,
                "price": order.price,
                "status": order.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Order insert returned no rows")
        return _row_to_order(row)

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def list_by_party(self, user_id: str, db: AsyncSession) -> list[Order]:
        result = await db.execute(_LIST_BY_PARTY_SQL, {"user_id": user_id})
        return [_row_to_order(row) for row in result.fetchall()]

    async def transition(
        self, order_id: str, from_status: str, to_status: str, db: AsyncSession
    ) -> Order | None:
        if not can_transition(from_status, to_status):
            raise InternalError(f"Illegal order transition {from_status} -> {to_status}")
        result = await db.execute(
            _TRANSITION_SQL,
            {"id": order_id, "from_status": from_status, "to_status": to_status},
        )
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def lock_unoffered(self, order_id: str, db: AsyncSession) -> Order | None:
        result = await db.execute(
            _LOCK_UNOFFERED_SQL,
            {"id": order_id, "status": OrderStatus.WAITING_CONFIRMATION.value},
        )
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def set_trade_offer_id(
        self, order_id: str, trade_offer_id: str, db: AsyncSession
    ) -> None:
        await db.execute(
            _SET_TRADE_OFFER_SQL, {"id": order_id, "trade_offer_id": trade_offer_id}
        )
