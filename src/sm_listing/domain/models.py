"""Listing domain model: pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Listing:
    id: str
    owner_id: str        # seller's external identity
    asset_id: str        # external asset reference
    name: str
    image_url: str
    price: int           # cents, > 0
    published: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_sellable_by(self, seller_id: str) -> bool:
        return self.published and self.owner_id == seller_id
