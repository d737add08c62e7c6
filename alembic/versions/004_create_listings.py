"""004: create listings table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            id          UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            owner_id    VARCHAR(64)     NOT NULL,
            asset_id    VARCHAR(64)     NOT NULL,
            name        VARCHAR(255)    NOT NULL,
            image_url   VARCHAR(1024)   NOT NULL,
            price       BIGINT          NOT NULL,
            published   BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_price_gt_0 CHECK (price > 0)
        );
    """)
    # At most one active listing per asset; sold rows remain as history
    op.execute("""
        CREATE UNIQUE INDEX uq_listings_active_asset
        ON listings (asset_id)
        WHERE published;
    """)
    op.execute("CREATE INDEX idx_listings_owner_active ON listings (owner_id) WHERE published;")
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
