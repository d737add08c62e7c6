"""Trade-banned inventory items: pure dataclass, no SQLAlchemy dependency.

Steam marks an item that changed hands recently as ``tradable: 0``. Such an
item cannot be sent in a trade offer until its cooldown runs out, so the
marketplace remembers it from the first inventory fetch that shows it.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

TRADE_BAN_COOLDOWN = timedelta(days=7)


@dataclass
class TradeBannedItem:
    steam_id: str
    asset_id: str
    market_hash_name: str
    icon_url: str
    unban_at: datetime
    id: int | None = None
    created_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        return now < self.unban_at


def find_trade_banned(
    steam_id: str, payload: dict[str, Any], now: datetime
) -> list[TradeBannedItem]:
    """Every asset in a Steam inventory page whose description is not tradable.

    Assets reference their description by (classid, instanceid); several assets
    can share one description.
    """
    assets = payload.get("assets")
    descriptions = payload.get("descriptions")
    if not isinstance(assets, list) or not isinstance(descriptions, list):
        return []

    untradable = {
        (d.get("classid"), d.get("instanceid")): d
        for d in descriptions
        if isinstance(d, dict) and d.get("tradable") == 0
    }
    items: list[TradeBannedItem] = []
    for asset in assets:
        if not isinstance(asset, dict) or not asset.get("assetid"):
            continue
        desc = untradable.get((asset.get("classid"), asset.get("instanceid")))
        if desc is None:
            continue
        items.append(
            TradeBannedItem(
                steam_id=steam_id,
                asset_id=str(asset["assetid"]),
                market_hash_name=desc.get("market_hash_name") or "",
                icon_url=desc.get("icon_url") or "",
                unban_at=now + TRADE_BAN_COOLDOWN,
            )
        )
    return items
