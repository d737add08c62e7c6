"""ListingRepository Protocol: interface contract for persistence layer."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_listing.domain.models import Listing


class ListingRepositoryProtocol(Protocol):
    async def get_active_by_asset(
        self, db: AsyncSession, asset_id: str, for_update: bool = False
    ) -> Listing | None: ...

    async def insert(
        self,
        db: AsyncSession,
        owner_id: str,
        asset_id: str,
        name: str,
        image_url: str,
        price: int,
    ) -> Listing: ...

    async def update_price(
        self, db: AsyncSession, asset_id: str, price: int
    ) -> Listing | None: ...

    async def delete_active(self, db: AsyncSession, asset_id: str) -> bool: ...

    async def unpublish(self, db: AsyncSession, listing_id: str) -> Listing | None: ...

    async def list_active(
        self, db: AsyncSession, owner_id: str | None = None
    ) -> list[Listing]: ...
