"""ListingApplicationService: publish / reprice / withdraw / browse.

Write operations commit on success and roll back on any error. The partial
unique index on active listings is the final guard against a concurrent
double publish; its IntegrityError is reported as a listing conflict.
An asset still under a trade ban cannot be published.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.cents import validate_amount
from src.sm_common.datetime_utils import to_iso
from src.sm_common.errors import (
    AssetTradeBannedError,
    InvalidRequestError,
    ListingConflictError,
    ListingNotFoundError,
)
from src.sm_inventory.domain.repository import TradeBanRepositoryProtocol
from src.sm_inventory.infrastructure.persistence import TradeBanRepository
from src.sm_listing.application.schemas import ListingListResponse, ListingResponse
from src.sm_listing.domain.repository import ListingRepositoryProtocol
from src.sm_listing.infrastructure.persistence import ListingRepository


def _check_price(price: int) -> None:
    try:
        validate_amount(price, "price_cents")
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from None


class ListingApplicationService:
    def __init__(
        self,
        repo: ListingRepositoryProtocol | None = None,
        trade_bans: TradeBanRepositoryProtocol | None = None,
    ) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()
        self._trade_bans: TradeBanRepositoryProtocol = trade_bans or TradeBanRepository()

    async def publish(
        self,
        db: AsyncSession,
        owner_id: str,
        asset_id: str,
        name: str,
        image_url: str,
        price: int,
    ) -> ListingResponse:
        missing = [
            field
            for field, value in (
                ("owner_id", owner_id),
                ("asset_id", asset_id),
                ("name", name),
                ("image_url", image_url),
            )
            if not value
        ]
        if missing:
            raise InvalidRequestError(f"missing fields: {', '.join(missing)}")
        _check_price(price)

        try:
            ban = await self._trade_bans.get_active(db, asset_id)
            if ban is not None:
                raise AssetTradeBannedError(asset_id, to_iso(ban.unban_at))
            existing = await self._repo.get_active_by_asset(db, asset_id)
            if existing is not None:
                raise ListingConflictError(asset_id, "item is already published")
            listing = await self._repo.insert(db, owner_id, asset_id, name, image_url, price)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ListingConflictError(asset_id, "item is already published") from None
        except Exception:
            await db.rollback()
            raise
        return ListingResponse.from_domain(listing)

    async def change_price(
        self, db: AsyncSession, asset_id: str, price: int
    ) -> ListingResponse:
        _check_price(price)
        try:
            listing = await self._repo.update_price(db, asset_id, price)
            if listing is None:
                raise ListingNotFoundError(asset_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ListingResponse.from_domain(listing)

    async def withdraw(self, db: AsyncSession, asset_id: str) -> None:
        """Remove the active listing from the market (hard delete)."""
        try:
            if not await self._repo.delete_active(db, asset_id):
                raise ListingNotFoundError(asset_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def list_active_by_owner(
        self, db: AsyncSession, owner_id: str
    ) -> ListingListResponse:
        listings = await self._repo.list_active(db, owner_id)
        return ListingListResponse(items=[ListingResponse.from_domain(x) for x in listings])

    async def list_all_active(self, db: AsyncSession) -> ListingListResponse:
        listings = await self._repo.list_active(db)
        return ListingListResponse(items=[ListingResponse.from_domain(x) for x in listings])
