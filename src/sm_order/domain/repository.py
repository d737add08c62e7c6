"""OrderRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def save(self, order: Order, db: AsyncSession) -> Order: ...

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None: ...

    async def list_by_party(self, user_id: str, db: AsyncSession) -> list[Order]: ...

    async def transition(
        self, order_id: str, from_status: str, to_status: str, db: AsyncSession
    ) -> Order | None: ...

    async def lock_unoffered(self, order_id: str, db: AsyncSession) -> Order | None: ...

    async def set_trade_offer_id(
        self, order_id: str, trade_offer_id: str, db: AsyncSession
    ) -> None: ...
