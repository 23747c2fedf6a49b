"""002: create markets and bets tables

Revision ID: 002
Revises: 001
Create Date: 2026-09-02
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id              VARCHAR(64)     PRIMARY KEY,
            title           VARCHAR(500)    NOT NULL,
            options         TEXT[]          NOT NULL DEFAULT ARRAY['Yes', 'No'],
            category        VARCHAR(64),
            status          VARCHAR(20)     NOT NULL DEFAULT 'DRAFT',
            resolved        BOOLEAN         NOT NULL DEFAULT FALSE,
            token_pool_yes  NUMERIC(38, 18) NOT NULL DEFAULT 0,
            token_pool_no   NUMERIC(38, 18) NOT NULL DEFAULT 0,
            pot             BIGINT          NOT NULL DEFAULT 0,
            symbol          VARCHAR(32),
            strike_price    NUMERIC(38, 18),
            ends_at         TIMESTAMPTZ,
            winning_option  VARCHAR(100),
            resolved_at     TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_status CHECK (
                status IN ('DRAFT', 'ACTIVE', 'PAUSED', 'RESOLVED', 'CANCELLED')
            ),
            CONSTRAINT ck_markets_binary CHECK (cardinality(options) = 2),
            CONSTRAINT ck_markets_pools_gte_0 CHECK (
                token_pool_yes >= 0 AND token_pool_no >= 0 AND pot >= 0
            ),
            CONSTRAINT ck_markets_strike_gt_0 CHECK (strike_price IS NULL OR strike_price > 0),
            CONSTRAINT ck_markets_resolution CHECK (
                resolved = FALSE
                OR (winning_option IS NOT NULL AND resolved_at IS NOT NULL)
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_markets_open ON markets (status, resolved) "
        "WHERE status = 'ACTIVE' AND resolved = FALSE;"
    )
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("""
        CREATE TABLE bets (
            id              VARCHAR(64)     PRIMARY KEY,
            market_id       VARCHAR(64)     NOT NULL REFERENCES markets(id),
            user_id         VARCHAR(64)     NOT NULL REFERENCES users(id),
            option          VARCHAR(100)    NOT NULL,
            token_stake     NUMERIC(38, 18) NOT NULL DEFAULT 0,
            stars_stake     BIGINT          NOT NULL DEFAULT 0,
            points_stake    BIGINT          NOT NULL DEFAULT 0,
            token_payout    NUMERIC(38, 18),
            points_payout   BIGINT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bets_stakes_gte_0 CHECK (
                token_stake >= 0 AND stars_stake >= 0 AND points_stake >= 0
            )
        );
    """)
    op.execute("CREATE INDEX idx_bets_market ON bets (market_id);")
    op.execute("COMMENT ON COLUMN markets.resolved IS 'flips FALSE→TRUE once, in the settlement transaction';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
