"""Settlement entry point.

POST /buy    settle a purchase against a published listing
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_handoff.infrastructure.http_gateway import get_handoff_gateway
from src.sm_settlement.application.schemas import BuyRequest, BuyResponse
from src.sm_settlement.application.service import SettlementEngine

router = APIRouter(tags=["settlement"])

_engine = SettlementEngine(gateway=get_handoff_gateway())


@router.post("/buy")
async def buy(
    body: BuyRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _engine.settle(db, body.to_domain())
    return success_response(BuyResponse.from_result(result).model_dump(), request)
