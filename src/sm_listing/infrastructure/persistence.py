"""ListingRepository: raw SQL persistence implementation.

"Active" always means published = TRUE. A partial unique index
(uq_listings_active_asset) allows at most one active row per asset_id;
sold rows stay behind with published = FALSE as history.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import InternalError
from src.sm_listing.domain.models import Listing

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_COLUMNS = "id, owner_id, asset_id, name, image_url, price, published, created_at, updated_at"

_GET_ACTIVE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM listings
    WHERE asset_id = :asset_id AND published
""")

_GET_ACTIVE_FOR_UPDATE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM listings
    WHERE asset_id = :asset_id AND published
    FOR UPDATE
""")

_INSERT_SQL = text(f"""
    INSERT INTO listings (owner_id, asset_id, name, image_url, price, published)
    VALUES (:owner_id, :asset_id, :name, :image_url, :price, TRUE)
    RETURNING {_COLUMNS}
""")

_UPDATE_PRICE_SQL = text(f"""
    UPDATE listings
    SET price = :price, updated_at = NOW()
    WHERE asset_id = :asset_id AND published
    RETURNING {_COLUMNS}
""")

_DELETE_ACTIVE_SQL = text("""
    DELETE FROM listings
    WHERE asset_id = :asset_id AND published
    RETURNING id
""")

# Compare-and-swap: only the first settlement flips the flag
_UNPUBLISH_SQL = text(f"""
    UPDATE listings
    SET published = FALSE, updated_at = NOW()
    WHERE id = CAST(:id AS UUID) AND published
    RETURNING {_COLUMNS}
""")

_LIST_ACTIVE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM listings
    WHERE published
      AND (CAST(:owner_id AS TEXT) IS NULL OR owner_id = CAST(:owner_id AS TEXT))
    ORDER BY created_at DESC, id DESC
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_listing(row: Any) -> Listing:
    return Listing(
        id=str(row.id),
        owner_id=row.owner_id,
        asset_id=row.asset_id,
        name=row.name,
        image_url=row.image_url,
        price=row.price,
        published=row.published,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingRepository:
    """Concrete implementation of ListingRepositoryProtocol using raw SQL."""

    async def get_active_by_asset(
        self, db: AsyncSession, asset_id: str, for_update: bool = False
    ) -> Listing | None:
        sql = _GET_ACTIVE_FOR_UPDATE_SQL if for_update else _GET_ACTIVE_SQL
        result = await db.execute(sql, {"asset_id": asset_id})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def insert(
        self,
        db: AsyncSession,
        owner_id: str,
        asset_id: str,
        name: str,
        image_url: str,
        price: int,
    ) -> Listing:
        result = await db.execute(
            _INSERT_SQL,
            {
                "owner_id": owner_id,
                "asset_id": asset_id,
                "name": name,
                "image_url": image_url,
                "price": price,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Listing insert returned no rows")
        return _row_to_listing(row)

    async def update_price(
        self, db: AsyncSession, asset_id: str, price: int
    ) -> Listing | None:
        result = await db.execute(_UPDATE_PRICE_SQL, {"asset_id": asset_id, "price": price})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def delete_active(self, db: AsyncSession, asset_id: str) -> bool:
        result = await db.execute(_DELETE_ACTIVE_SQL, {"asset_id": asset_id})
        return result.fetchone() is not None

    async def unpublish(self, db: AsyncSession, listing_id: str) -> Listing | None:
        result = await db.execute(_UNPUBLISH_SQL, {"id": listing_id})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def list_active(
        self, db: AsyncSession, owner_id: str | None = None
    ) -> list[Listing]:
        result = await db.execute(_LIST_ACTIVE_SQL, {"owner_id": owner_id})
        return [_row_to_listing(row) for row in result.fetchall()]
