"""Pydantic schemas for sm_listing API."""

from pydantic import BaseModel, Field

from src.sm_common.cents import cents_to_display
from src.sm_common.datetime_utils import to_iso
from src.sm_listing.domain.models import Listing


class PublishItemRequest(BaseModel):
    owner_id: str = Field(..., min_length=1, description="Seller's Steam ID")
    asset_id: str = Field(..., min_length=1, description="Steam asset id")
    name: str = Field(..., min_length=1, max_length=255)
    image_url: str = Field(..., min_length=1, max_length=1024)
    price_cents: int = Field(..., gt=0)


class ChangePriceRequest(BaseModel):
    price_cents: int = Field(..., gt=0)


class ListingResponse(BaseModel):
    id: str
    owner_id: str
    asset_id: str
    name: str
    image_url: str
    price_cents: int
    price_display: str
    published: bool
    created_at: str

    @classmethod
    def from_domain(cls, listing: Listing) -> "ListingResponse":
        return cls(
            id=listing.id,
            owner_id=listing.owner_id,
            asset_id=listing.asset_id,
            name=listing.name,
            image_url=listing.image_url,
            price_cents=listing.price,
            price_display=cents_to_display(listing.price),
            published=listing.published,
            created_at=to_iso(listing.created_at),
        )


class ListingListResponse(BaseModel):
    items: list[ListingResponse]
