"""Inventory read-through proxy.

Steam inventory pages are cached in Redis under ``inventory:{steam_id}`` for
a fixed TTL. The cache belongs to this module alone; settlement never reads
it. ``invalidate`` drops one user's entry, e.g. after a trade completes.

Every page fetched from Steam is scanned for untradable assets, which are
stored as trade-banned items and returned next to the inventory. Publishing
refuses an asset while its ban is active.
"""
import json
import logging
from datetime import UTC, datetime
from typing import Any

import httpx
import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sm_common.errors import InventoryUnavailableError
from src.sm_inventory.application.schemas import InventoryResponse, TradeBannedItemResponse
from src.sm_inventory.domain.models import find_trade_banned
from src.sm_inventory.domain.repository import TradeBanRepositoryProtocol
from src.sm_inventory.infrastructure.persistence import TradeBanRepository

logger = logging.getLogger(__name__)

_STEAM_APP_ID = 730   # CS2
_STEAM_CONTEXT_ID = 2


def cache_key(steam_id: str) -> str:
    return f"inventory:{steam_id}"


class InventoryService:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        ttl_seconds: int | None = None,
        trade_bans: TradeBanRepositoryProtocol | None = None,
    ) -> None:
        self._client = client
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.INVENTORY_CACHE_TTL_SECONDS
        self._trade_bans: TradeBanRepositoryProtocol = trade_bans or TradeBanRepository()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.STEAM_COMMUNITY_URL, timeout=15.0
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_inventory(
        self, redis: aioredis.Redis, db: AsyncSession, steam_id: str
    ) -> InventoryResponse:
        cached = await redis.get(cache_key(steam_id))
        if cached is not None:
            data = json.loads(cached)
        else:
            data = await self._fetch(steam_id)
            await self._record_trade_bans(db, steam_id, data)
            await redis.set(cache_key(steam_id), json.dumps(data), ex=self._ttl)

        banned = await self._trade_bans.list_for_owner(db, steam_id)
        return InventoryResponse(
            steam_id=steam_id,
            steam_inventory=data,
            trade_banned_items=[TradeBannedItemResponse.from_domain(b) for b in banned],
        )

    async def _record_trade_bans(
        self, db: AsyncSession, steam_id: str, data: dict[str, Any]
    ) -> None:
        items = find_trade_banned(steam_id, data, datetime.now(UTC))
        if not items:
            return
        try:
            await self._trade_bans.record_many(db, items)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Trade-banned assets seen: steam_id=%s count=%d", steam_id, len(items))

    async def invalidate(self, redis: aioredis.Redis, steam_id: str) -> bool:
        return bool(await redis.delete(cache_key(steam_id)))

    async def _fetch(self, steam_id: str) -> dict[str, Any]:
        path = f"/inventory/{steam_id}/{_STEAM_APP_ID}/{_STEAM_CONTEXT_ID}"
        try:
            resp = await self._get_client().get(path, params={"l": "english", "count": 5000})
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Inventory fetch failed: steam_id=%s: %r", steam_id, exc)
            raise InventoryUnavailableError(steam_id) from exc
        if not isinstance(data, dict):
            raise InventoryUnavailableError(steam_id)
        return data


_service: InventoryService | None = None


def get_inventory_service() -> InventoryService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = InventoryService()
    return _service


async def close_inventory_service() -> None:
    global _service  # noqa: PLW0603
    if _service is not None:
        await _service.aclose()
        _service = None
