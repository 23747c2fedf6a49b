"""MarketRepository: concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Rows are validated here: category strings map onto MarketCategory, and
markets without exactly two outcome labels are skipped with a warning.
"""

import logging
from decimal import Decimal

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.datetime_utils import as_utc
from src.pm_common.enums import MarketCategory, MarketStatus
from src.pm_market.domain.models import Bet, Market

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_LIST_OPEN_MARKETS_SQL = text("""
    SELECT id, title, options, category, status, resolved,
           token_pool_yes, token_pool_no, pot, ends_at,
           symbol, strike_price, winning_option, resolved_at
    FROM markets
    WHERE status = 'ACTIVE' AND resolved = FALSE
    ORDER BY created_at ASC, id ASC
""")

_LIST_BETS_SQL = text("""
    SELECT id, market_id, user_id, option,
           token_stake, stars_stake, points_stake,
           token_payout, points_payout
    FROM bets
    WHERE market_id IN :market_ids
    ORDER BY created_at ASC, id ASC
""").bindparams(bindparam("market_ids", expanding=True))

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_bet(row: object) -> Bet:
    return Bet(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        option=row.option,  # type: ignore[attr-defined]
        token_stake=Decimal(row.token_stake or 0),  # type: ignore[attr-defined]
        stars_stake=int(row.stars_stake or 0),  # type: ignore[attr-defined]
        points_stake=int(row.points_stake or 0),  # type: ignore[attr-defined]
        token_payout=row.token_payout,  # type: ignore[attr-defined]
        points_payout=row.points_payout,  # type: ignore[attr-defined]
    )


def _row_to_market(row: object) -> Market | None:
    options = list(row.options or [])  # type: ignore[attr-defined]
    if len(options) != 2:
        logger.warning(
            "Skipping market %s: expected 2 options, got %r",
            row.id,  # type: ignore[attr-defined]
            options,
        )
        return None
    strike = row.strike_price  # type: ignore[attr-defined]
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        options=(options[0], options[1]),
        category=MarketCategory.parse(row.category),  # type: ignore[attr-defined]
        status=MarketStatus(row.status),  # type: ignore[attr-defined]
        resolved=bool(row.resolved),  # type: ignore[attr-defined]
        token_pool_yes=Decimal(row.token_pool_yes or 0),  # type: ignore[attr-defined]
        token_pool_no=Decimal(row.token_pool_no or 0),  # type: ignore[attr-defined]
        pot=int(row.pot or 0),  # type: ignore[attr-defined]
        ends_at=as_utc(row.ends_at),  # type: ignore[attr-defined]
        symbol=row.symbol,  # type: ignore[attr-defined]
        strike_price=Decimal(strike) if strike is not None else None,
        winning_option=row.winning_option,  # type: ignore[attr-defined]
        resolved_at=as_utc(row.resolved_at),  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Read side of the settlement pass; writes live in pm_clearing.ledger."""

    async def list_open_markets(self, db: AsyncSession) -> list[Market]:
        rows = (await db.execute(_LIST_OPEN_MARKETS_SQL)).fetchall()
        markets = [m for m in (_row_to_market(r) for r in rows) if m is not None]
        if not markets:
            return []

        by_id = {m.id: m for m in markets}
        bet_rows = (
            await db.execute(_LIST_BETS_SQL, {"market_ids": list(by_id)})
        ).fetchall()
        for row in bet_rows:
            market = by_id.get(row.market_id)
            if market is not None:
                market.bets.append(_row_to_bet(row))
        return markets
