"""Pydantic schemas for sm_order API."""
from pydantic import BaseModel, Field

from src.sm_common.cents import cents_to_display
from src.sm_common.datetime_utils import to_iso
from src.sm_order.domain.models import Order


class CancelOrderRequest(BaseModel):
    actor_id: str = Field(..., min_length=1, description="Buyer or seller Steam ID")


class OrderResponse(BaseModel):
    id: str
    asset_id: str
    buyer_id: str
    seller_id: str
    price_cents: int
    price_display: str
    status: str
    trade_offer_id: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            asset_id=order.asset_id,
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            price_cents=order.price,
            price_display=cents_to_display(order.price),
            status=order.status,
            trade_offer_id=order.trade_offer_id,
            created_at=to_iso(order.created_at),
            updated_at=to_iso(order.updated_at),
        )


class OrderActionResponse(BaseModel):
    message: str
    changed: bool  # False when the call was an idempotent repeat
    order: OrderResponse
    handoff_error: str | None = None  # set when the trade offer request failed


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
