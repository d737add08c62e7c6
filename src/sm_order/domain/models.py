"""Order domain model: pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime

from src.sm_common.enums import OrderStatus

# Lifecycle: PENDING -> WAITING_CONFIRMATION -> COMPLETED, PENDING -> CANCELED
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING.value: frozenset(
        {OrderStatus.WAITING_CONFIRMATION.value, OrderStatus.CANCELED.value}
    ),
    OrderStatus.WAITING_CONFIRMATION.value: frozenset({OrderStatus.COMPLETED.value}),
    OrderStatus.COMPLETED.value: frozenset(),
    OrderStatus.CANCELED.value: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


@dataclass
class Order:
    id: str
    asset_id: str
    buyer_id: str
    seller_id: str
    price: int  # cents
    status: str = OrderStatus.PENDING.value
    trade_offer_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS.get(self.status)

    def is_party(self, user_id: str) -> bool:
        return user_id in (self.buyer_id, self.seller_id)
