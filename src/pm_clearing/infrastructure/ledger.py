"""Ledger writer: applies one market's resolution or expiry.

Both operations run inside the caller's transaction; any exception must
roll the whole unit back. The market UPDATE is a compare-and-set on
resolved = FALSE, so two overlapping passes cannot both pay out: the loser
sees zero rows, writes nothing else and reports False.
"""
import json
import logging
import uuid
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_clearing.domain.payout import SettlementResult
from src.pm_clearing.infrastructure.fee_collector import credit_fee_pools
from src.pm_common.enums import WalletTransactionType

logger = logging.getLogger(__name__)

_RESOLVE_MARKET_SQL = text("""
    UPDATE markets
    SET resolved = TRUE,
        status = 'RESOLVED',
        winning_option = :winning_option,
        resolved_at = :now,
        ends_at = :now,
        updated_at = NOW()
    WHERE id = :market_id AND resolved = FALSE AND status = 'ACTIVE'
""")

_EXPIRE_MARKET_SQL = text("""
    UPDATE markets
    SET status = 'PAUSED',
        ends_at = :now,
        updated_at = NOW()
    WHERE id = :market_id AND resolved = FALSE AND status = 'ACTIVE'
""")

_SET_BET_PAYOUT_SQL = text("""
    UPDATE bets
    SET token_payout = CAST(:token_payout AS NUMERIC),
        points_payout = CAST(:points_payout AS BIGINT)
    WHERE id = :bet_id AND market_id = :market_id
      AND token_payout IS NULL AND points_payout IS NULL
""")

_INSERT_WALLET_TX_SQL = text("""
    INSERT INTO wallet_transactions (id, user_id, type, amount, meta, created_at)
    VALUES (:id, :user_id, :type, :amount, CAST(:meta AS JSONB), :now)
""")

_CREDIT_POINTS_SQL = text("""
    UPDATE users SET points = points + :amount WHERE id = :user_id
""")


async def apply_settlement(
    result: SettlementResult,
    now: datetime,
    db: AsyncSession,
    mirror_legacy_wheel_pool: bool = True,
) -> bool:
    """Resolve the market and write every payout and fee increment.

    Returns False (nothing written) when the market was already resolved.
    """
    claimed = await db.execute(
        _RESOLVE_MARKET_SQL,
        {
            "market_id": result.market_id,
            "winning_option": result.winning_option,
            "now": now,
        },
    )
    if claimed.rowcount == 0:
        logger.info("Market %s already settled by another pass", result.market_id)
        return False

    for payout in result.payouts:
        marked = await db.execute(
            _SET_BET_PAYOUT_SQL,
            {
                "bet_id": payout.bet_id,
                "market_id": result.market_id,
                "token_payout": payout.token_amount,
                "points_payout": payout.points_amount,
            },
        )
        if marked.rowcount == 0:
            # Bet already carries a payout; crediting again would double-pay.
            logger.warning(
                "Bet %s in market %s already has a payout; skipping credit",
                payout.bet_id,
                result.market_id,
            )
            continue
        if payout.token_amount is not None:
            await db.execute(
                _INSERT_WALLET_TX_SQL,
                {
                    "id": str(uuid.uuid4()),
                    "user_id": payout.user_id,
                    "type": WalletTransactionType.PREDICTION_WIN.value,
                    "amount": payout.token_amount,
                    "meta": json.dumps(
                        {
                            "market_id": result.market_id,
                            "bet_id": payout.bet_id,
                            "user_stake": str(payout.token_stake),
                            "win_pool": str(result.win_pool),
                            "winning_side_total": str(result.winning_side_total),
                            "payout_per_unit": str(result.payout_per_unit),
                        }
                    ),
                    "now": now,
                },
            )
        if payout.points_amount is not None:
            await db.execute(
                _CREDIT_POINTS_SQL,
                {"user_id": payout.user_id, "amount": payout.points_amount},
            )

    await credit_fee_pools(result.fee_split, db, mirror_legacy_wheel_pool)
    return True


async def apply_expiry(market_id: str, now: datetime, db: AsyncSession) -> bool:
    """Close betting (PAUSED) without settling; resolved stays FALSE."""
    closed = await db.execute(_EXPIRE_MARKET_SQL, {"market_id": market_id, "now": now})
    return closed.rowcount > 0
