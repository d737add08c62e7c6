"""Settlement domain models: pure dataclasses."""
from dataclasses import dataclass

from src.sm_order.domain.models import Order


@dataclass(frozen=True)
class SettlementRequest:
    buyer_id: str
    seller_id: str
    asset_id: str
    price: int  # cents the buyer agreed to pay


@dataclass
class SettlementResult:
    buyer_balance: int   # cents, after debit
    seller_balance: int  # cents, after credit
    order: Order
