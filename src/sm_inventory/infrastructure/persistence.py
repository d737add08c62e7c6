"""TradeBanRepository: raw SQL persistence for trade-banned assets.

The first sighting of an asset wins: its cooldown is not restarted by later
inventory fetches. Transaction ownership stays with the caller.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_inventory.domain.models import TradeBannedItem

_COLUMNS = "id, steam_id, asset_id, market_hash_name, icon_url, unban_at, created_at"

_INSERT_IF_ABSENT_SQL = text("""
    INSERT INTO trade_banned_items
        (steam_id, asset_id, market_hash_name, icon_url, unban_at)
    VALUES
        (:steam_id, :asset_id, :market_hash_name, :icon_url, :unban_at)
    ON CONFLICT (asset_id) DO NOTHING
""")

_LIST_FOR_OWNER_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM trade_banned_items
    WHERE steam_id = :steam_id
    ORDER BY unban_at, asset_id
""")

_GET_ACTIVE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM trade_banned_items
    WHERE asset_id = :asset_id AND unban_at > NOW()
""")


def _row_to_item(row: Any) -> TradeBannedItem:
    return TradeBannedItem(
        id=row.id,
        steam_id=row.steam_id,
        asset_id=row.asset_id,
        market_hash_name=row.market_hash_name,
        icon_url=row.icon_url,
        unban_at=row.unban_at,
        created_at=row.created_at,
    )


class TradeBanRepository:
    async def record_many(self, db: AsyncSession, items: list[TradeBannedItem]) -> None:
        if not items:
            return
        await db.execute(
            _INSERT_IF_ABSENT_SQL,
            [
                {
                    "steam_id": item.steam_id,
                    "asset_id": item.asset_id,
                    "market_hash_name": item.market_hash_name,
                    "icon_url": item.icon_url,
                    "unban_at": item.unban_at,
                }
                for item in items
            ],
        )

    async def list_for_owner(
        self, db: AsyncSession, steam_id: str
    ) -> list[TradeBannedItem]:
        result = await db.execute(_LIST_FOR_OWNER_SQL, {"steam_id": steam_id})
        return [_row_to_item(row) for row in result.fetchall()]

    async def get_active(
        self, db: AsyncSession, asset_id: str
    ) -> TradeBannedItem | None:
        result = await db.execute(_GET_ACTIVE_SQL, {"asset_id": asset_id})
        row = result.fetchone()
        return _row_to_item(row) if row else None
