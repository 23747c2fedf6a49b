"""Bounded-concurrency price batch for one settlement pass."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

from src.pm_pricing.domain.lookup import PriceLookupProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceSnapshot:
    """Symbol → USD price, held only for the duration of one pass."""

    prices: Mapping[str, Decimal]

    def get(self, symbol: str) -> Decimal | None:
        return self.prices.get(symbol.upper())

    def __len__(self) -> int:
        return len(self.prices)


async def fetch_price_snapshot(
    symbols: Iterable[str],
    lookup: PriceLookupProtocol,
    concurrency: int,
) -> PriceSnapshot:
    """One lookup per distinct symbol; failures are recorded as absent."""
    distinct = sorted({s.upper() for s in symbols if s})
    if not distinct:
        return PriceSnapshot(MappingProxyType({}))

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _one(symbol: str) -> tuple[str, Decimal | None]:
        async with semaphore:
            try:
                price = await lookup.lookup(symbol)
            except Exception:
                logger.warning("Price lookup failed for %s", symbol, exc_info=True)
                return symbol, None
        if price is None:
            logger.info("No price available for %s", symbol)
        return symbol, price

    results = await asyncio.gather(*(_one(s) for s in distinct))
    prices = {symbol: price for symbol, price in results if price is not None}
    logger.info("Price snapshot: %d/%d symbols resolved", len(prices), len(distinct))
    return PriceSnapshot(MappingProxyType(prices))
