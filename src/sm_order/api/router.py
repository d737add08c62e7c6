"""sm_order REST endpoints.

GET /orders/{user_id}           orders where the user is buyer or seller
PUT /order/confirm/{order_id}   seller confirms; triggers the trade offer
PUT /order/complete/{order_id}  hand-off succeeded
PUT /order/cancel/{order_id}    buyer or seller cancels a PENDING order
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_handoff.infrastructure.http_gateway import get_handoff_gateway
from src.sm_order.application.schemas import CancelOrderRequest
from src.sm_order.application.service import OrderLifecycleService

router = APIRouter(tags=["orders"])

_service = OrderLifecycleService(gateway=get_handoff_gateway())


@router.get("/orders/{user_id}")
async def list_orders(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.list_for_user(user_id, db)
    return success_response(result.model_dump(), request)


@router.put("/order/confirm/{order_id}")
async def confirm_order(
    order_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.confirm(order_id, db)
    return success_response(result.model_dump(), request)


@router.put("/order/complete/{order_id}")
async def complete_order(
    order_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.complete(order_id, db)
    return success_response(result.model_dump(), request)


@router.put("/order/cancel/{order_id}")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.cancel(order_id, body.actor_id, db)
    return success_response(result.model_dump(), request)
