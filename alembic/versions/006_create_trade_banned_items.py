"""006: create trade_banned_items table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE trade_banned_items (
            id                  BIGSERIAL       PRIMARY KEY,
            steam_id            VARCHAR(64)     NOT NULL,
            asset_id            VARCHAR(64)     NOT NULL,
            market_hash_name    VARCHAR(255)    NOT NULL,
            icon_url            VARCHAR(1024)   NOT NULL,
            unban_at            TIMESTAMPTZ     NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_trade_banned_items_asset UNIQUE (asset_id)
        );
    """)
    op.execute("CREATE INDEX idx_trade_banned_items_owner ON trade_banned_items (steam_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS trade_banned_items CASCADE;")
