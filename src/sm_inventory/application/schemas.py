"""Pydantic schemas for sm_inventory API."""
from typing import Any

from pydantic import BaseModel

from src.sm_common.datetime_utils import to_iso
from src.sm_inventory.domain.models import TradeBannedItem


class TradeBannedItemResponse(BaseModel):
    asset_id: str
    market_hash_name: str
    icon_url: str
    unban_at: str

    @classmethod
    def from_domain(cls, item: TradeBannedItem) -> "TradeBannedItemResponse":
        return cls(
            asset_id=item.asset_id,
            market_hash_name=item.market_hash_name,
            icon_url=item.icon_url,
            unban_at=to_iso(item.unban_at),
        )


class InventoryResponse(BaseModel):
    steam_id: str
    steam_inventory: dict[str, Any]
    trade_banned_items: list[TradeBannedItemResponse]
