"""sm_account REST API.

POST /deposit            credit a balance (creates the account lazily)
POST /withdraw           debit now, PENDING until manual approval
GET  /balance/{user_id}  balance plus chronological transaction history
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.application.schemas import DepositRequest, WithdrawRequest
from src.sm_account.application.service import AccountApplicationService
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response

router = APIRouter(tags=["account"])

_service = AccountApplicationService()


@router.get("/balance/{user_id}")
async def get_balance(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, user_id)
    return success_response(data.model_dump(), request)


@router.post("/deposit")
async def deposit(
    body: DepositRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.deposit(db, body.user_id, body.amount_cents)
    return success_response(data.model_dump(), request)


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.request_withdrawal(db, body.user_id, body.amount_cents)
    return success_response(data.model_dump(), request)
