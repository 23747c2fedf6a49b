"""SettlementService: one pass over every open market.

Load → classify → batch prices → per market: decide → calculate → write.
Each market's write gets its own session and transaction, so one bad market
only bumps the `failed` counter; it stays unresolved and is picked up again
by the next pass.
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_clearing.application.schemas import ResolvedMarketItem, SettlementRunSummary
from src.pm_clearing.domain.config import SettlementConfig
from src.pm_clearing.domain.decision import Decision, decide
from src.pm_clearing.domain.payout import calculate_settlement
from src.pm_clearing.infrastructure.ledger import apply_expiry, apply_settlement
from src.pm_common.datetime_utils import utc_now
from src.pm_common.enums import SettlementAction
from src.pm_common.errors import SettlementRunError
from src.pm_common.retry import with_db_retry
from src.pm_market.domain.classifier import MarketKind, PriceTrigger, classify_market
from src.pm_market.domain.models import Market
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_pricing.domain.batch import PriceSnapshot, fetch_price_snapshot
from src.pm_pricing.domain.lookup import PriceLookupProtocol

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

_SKIP_COUNTERS = {
    SettlementAction.SKIP_NO_MATCH: "skipped_no_match",
    SettlementAction.SKIP_NO_PRICE: "skipped_no_price",
    SettlementAction.SKIP_UNSUPPORTED: "skipped_unsupported",
}


class SettlementService:
    def __init__(
        self,
        config: SettlementConfig,
        price_lookup: PriceLookupProtocol,
        session_factory: SessionFactory,
        repo: MarketRepositoryProtocol | None = None,
    ) -> None:
        self._config = config
        self._prices = price_lookup
        self._session_factory = session_factory
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()

    async def run_pass(self, now: datetime | None = None) -> SettlementRunSummary:
        """Run one settlement pass. Raises SettlementRunError if markets can't load."""
        now = now or utc_now()
        try:
            markets = await with_db_retry(self._load_open_markets)
        except Exception as exc:
            logger.exception("Settlement pass aborted: could not load open markets")
            raise SettlementRunError(str(exc)) from exc

        summary = SettlementRunSummary(checked=len(markets))
        if not markets:
            return summary

        kinds = {m.id: classify_market(m) for m in markets}
        symbols = [k.symbol for k in kinds.values() if isinstance(k, PriceTrigger)]
        prices = await fetch_price_snapshot(
            symbols, self._prices, self._config.price_lookup_concurrency
        )
        summary.price_map_size = len(prices)

        for market in markets:
            await self._process_market(market, kinds[market.id], prices, now, summary)

        logger.info(
            "Settlement pass: checked=%d closed=%d (resolved=%d expired=%d) "
            "no_match=%d no_price=%d unsupported=%d already_settled=%d failed=%d prices=%d",
            summary.checked,
            summary.closed,
            summary.resolved,
            summary.expired,
            summary.skipped_no_match,
            summary.skipped_no_price,
            summary.skipped_unsupported,
            summary.already_settled,
            summary.failed,
            summary.price_map_size,
        )
        return summary

    async def _load_open_markets(self) -> list[Market]:
        async with self._session_factory() as db:
            return await self._repo.list_open_markets(db)

    async def _process_market(
        self,
        market: Market,
        kind: MarketKind,
        prices: PriceSnapshot,
        now: datetime,
        summary: SettlementRunSummary,
    ) -> None:
        decision = decide(market, kind, prices, now)
        counter = _SKIP_COUNTERS.get(decision.action)
        if counter is not None:
            setattr(summary, counter, getattr(summary, counter) + 1)
            logger.info("Market %s skipped: %s (%s)", market.id, decision.action.value, kind)
            return

        if decision.action == SettlementAction.RESOLVE:
            await self._resolve(market, kind, decision, now, summary)
        elif decision.action == SettlementAction.EXPIRE:
            await self._expire(market, now, summary)

    async def _resolve(
        self,
        market: Market,
        kind: MarketKind,
        decision: Decision,
        now: datetime,
        summary: SettlementRunSummary,
    ) -> None:
        try:
            if not isinstance(kind, PriceTrigger) or decision.winning_option is None:
                raise TypeError(f"RESOLVE requires a price trigger and a winner, got {kind!r}")
            result = calculate_settlement(market, decision.winning_option, self._config)
            async with self._session_factory() as db:
                async with db.begin():
                    applied = await apply_settlement(
                        result, now, db, self._config.mirror_legacy_wheel_pool
                    )
        except Exception:
            logger.exception("Failed to settle market %s", market.id)
            summary.failed += 1
            return

        if not applied:
            summary.already_settled += 1
            return

        summary.closed += 1
        summary.resolved += 1
        summary.items.append(
            ResolvedMarketItem(
                id=market.id,
                title=market.title,
                category=market.category.value,
                symbol=kind.symbol,
                target_price=float(kind.strike),
                current_price=float(decision.current_price or 0),
                winning_option=result.winning_option,
            )
        )
        logger.info(
            "Resolved market %s: %s current=%s strike=%s winner=%s fee=%s "
            "token_paid=%s points_paid=%d payouts=%d",
            market.id,
            kind.symbol,
            decision.current_price,
            kind.strike,
            result.winning_option,
            result.platform_fee,
            result.token_paid,
            result.points_paid,
            len(result.payouts),
        )

    async def _expire(
        self, market: Market, now: datetime, summary: SettlementRunSummary
    ) -> None:
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    applied = await apply_expiry(market.id, now, db)
        except Exception:
            logger.exception("Failed to close expired market %s", market.id)
            summary.failed += 1
            return

        if not applied:
            summary.already_settled += 1
            return
        summary.closed += 1
        summary.expired += 1
        logger.info(
            "Market %s expired at %s; paused pending manual settlement",
            market.id,
            market.ends_at,
        )
