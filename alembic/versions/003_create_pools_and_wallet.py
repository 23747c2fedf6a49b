"""003: create fee pools, legacy wheel pool and wallet transactions

Revision ID: 003
Revises: 002
Create Date: 2026-09-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE pool_balances (
            id          VARCHAR(32)     PRIMARY KEY,
            balance     NUMERIC(38, 18) NOT NULL DEFAULT 0,
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_pool_balances_id CHECK (
                id IN ('leaderboard', 'referral', 'wheel', 'treasury')
            ),
            CONSTRAINT ck_pool_balances_gte_0 CHECK (balance >= 0)
        );
    """)
    op.execute("""
        INSERT INTO pool_balances (id, balance) VALUES
            ('leaderboard', 0), ('referral', 0), ('wheel', 0), ('treasury', 0)
        ON CONFLICT (id) DO NOTHING;
    """)
    op.execute("""
        CREATE TABLE wheel_pool (
            id          VARCHAR(32)     PRIMARY KEY,
            balance     NUMERIC(38, 18) NOT NULL DEFAULT 0
        );
    """)
    op.execute("""
        CREATE TABLE wallet_transactions (
            id          VARCHAR(64)     PRIMARY KEY,
            user_id     VARCHAR(64)     NOT NULL REFERENCES users(id),
            type        VARCHAR(32)     NOT NULL,
            amount      NUMERIC(38, 18) NOT NULL,
            meta        JSONB           NOT NULL DEFAULT '{}'::jsonb,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_wallet_tx_user ON wallet_transactions (user_id, created_at);")
    op.execute(
        "CREATE INDEX idx_wallet_tx_market ON wallet_transactions ((meta->>'market_id'));"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wallet_transactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS wheel_pool CASCADE;")
    op.execute("DROP TABLE IF EXISTS pool_balances CASCADE;")
