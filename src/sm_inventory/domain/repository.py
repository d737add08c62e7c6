"""TradeBanRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_inventory.domain.models import TradeBannedItem


class TradeBanRepositoryProtocol(Protocol):
    async def record_many(self, db: AsyncSession, items: list[TradeBannedItem]) -> None: ...

    async def list_for_owner(
        self, db: AsyncSession, steam_id: str
    ) -> list[TradeBannedItem]: ...

    async def get_active(
        self, db: AsyncSession, asset_id: str
    ) -> TradeBannedItem | None: ...
