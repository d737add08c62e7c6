"""Pydantic schemas for the buy endpoint."""
from pydantic import BaseModel, Field

from src.sm_common.cents import cents_to_display
from src.sm_order.application.schemas import OrderResponse
from src.sm_settlement.domain.models import SettlementRequest, SettlementResult


class BuyRequest(BaseModel):
    buyer_id: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1, description="Steam asset id of the listing")
    price_cents: int = Field(..., gt=0)

    def to_domain(self) -> SettlementRequest:
        return SettlementRequest(
            buyer_id=self.buyer_id,
            seller_id=self.seller_id,
            asset_id=self.item_id,
            price=self.price_cents,
        )


class BuyResponse(BaseModel):
    message: str = "Purchase successful"
    buyer_balance_cents: int
    buyer_balance_display: str
    seller_balance_cents: int
    order: OrderResponse

    @classmethod
    def from_result(cls, result: SettlementResult) -> "BuyResponse":
        return cls(
            buyer_balance_cents=result.buyer_balance,
            buyer_balance_display=cents_to_display(result.buyer_balance),
            seller_balance_cents=result.seller_balance,
            order=OrderResponse.from_domain(result.order),
        )
