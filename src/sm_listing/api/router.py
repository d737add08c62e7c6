"""sm_listing REST endpoints.

POST   /publish_item               list an asset for sale
PUT    /change_price/{asset_id}    reprice the active listing
DELETE /remove_item/{asset_id}     withdraw the active listing
GET    /market_items               every active listing
GET    /selling_items/{user_id}    active listings of one seller
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_listing.application.schemas import ChangePriceRequest, PublishItemRequest
from src.sm_listing.application.service import ListingApplicationService

router = APIRouter(tags=["listings"])

_service = ListingApplicationService()


@router.post("/publish_item")
async def publish_item(
    body: PublishItemRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.publish(
        db, body.owner_id, body.asset_id, body.name, body.image_url, body.price_cents
    )
    return success_response(result.model_dump(), request)


@router.put("/change_price/{asset_id}")
async def change_price(
    asset_id: str,
    body: ChangePriceRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.change_price(db, asset_id, body.price_cents)
    return success_response(result.model_dump(), request)


@router.delete("/remove_item/{asset_id}")
async def remove_item(
    asset_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _service.withdraw(db, asset_id)
    return success_response({"message": "Item removed successfully."}, request)


@router.get("/market_items")
async def market_items(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.list_all_active(db)
    return success_response(result.model_dump(), request)


@router.get("/selling_items/{user_id}")
async def selling_items(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.list_active_by_owner(db, user_id)
    return success_response(result.model_dump(), request)
