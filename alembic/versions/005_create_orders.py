"""005: create orders table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id              VARCHAR(64)     PRIMARY KEY,
            asset_id        VARCHAR(64)     NOT NULL,
            buyer_id        VARCHAR(64)     NOT NULL,
            seller_id       VARCHAR(64)     NOT NULL,
            price           BIGINT          NOT NULL,
            status          VARCHAR(30)     NOT NULL DEFAULT 'PENDING',
            trade_offer_id  VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_status CHECK (
                status IN ('PENDING', 'WAITING_CONFIRMATION', 'COMPLETED', 'CANCELED')
            ),
            CONSTRAINT ck_orders_price_gt_0 CHECK (price > 0),
            CONSTRAINT ck_orders_not_self_trade CHECK (buyer_id <> seller_id)
        );
    """)
    op.execute("CREATE INDEX idx_orders_buyer ON orders (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_seller ON orders (seller_id, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_asset ON orders (asset_id);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE orders IS 'Settlement audit trail; outlives listings';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
