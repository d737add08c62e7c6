"""003: create account_transactions table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE account_transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES accounts (user_id),
            kind            VARCHAR(20)     NOT NULL,
            amount          BIGINT          NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'COMPLETED',
            balance_after   BIGINT          NOT NULL,
            reference_id    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_account_tx_kind CHECK (
                kind IN ('DEPOSIT', 'WITHDRAWAL', 'PURCHASE', 'SALE')
            ),
            CONSTRAINT ck_account_tx_status CHECK (
                status IN ('PENDING', 'COMPLETED', 'FAILED')
            ),
            CONSTRAINT ck_account_tx_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_account_tx_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_account_tx_user ON account_transactions (user_id, id);")
    op.execute("""
        CREATE INDEX idx_account_tx_reference
        ON account_transactions (reference_id)
        WHERE reference_id IS NOT NULL;
    """)
    op.execute("CREATE INDEX idx_account_tx_kind_status ON account_transactions (kind, status);")
    op.execute(
        "COMMENT ON TABLE account_transactions IS "
        "'Append-only ledger; only WITHDRAWAL status may change after insert';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS account_transactions CASCADE;")
