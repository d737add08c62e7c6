"""Inventory proxy endpoints.

GET    /inventory/{steam_id}        cached Steam inventory plus stored trade-banned items
DELETE /inventory/{steam_id}/cache  drop the cached copy
"""
from typing import Annotated

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import get_db_session
from src.sm_common.redis_client import get_redis
from src.sm_common.response import ApiResponse, success_response
from src.sm_inventory.application.service import InventoryService, get_inventory_service

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/{steam_id}")
async def get_inventory(
    steam_id: str,
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
    request: Request,
) -> ApiResponse:
    result = await service.get_inventory(redis, db, steam_id)
    return success_response(result.model_dump(), request)


@router.delete("/{steam_id}/cache")
async def invalidate_inventory(
    steam_id: str,
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
    request: Request,
) -> ApiResponse:
    removed = await service.invalidate(redis, steam_id)
    return success_response({"steam_id": steam_id, "invalidated": removed}, request)
