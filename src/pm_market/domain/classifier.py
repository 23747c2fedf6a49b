"""Market classification: how (if at all) a market can close automatically.

Price-triggered markets carry structured symbol/strike fields. Markets created
before those columns existed only encode them in the title, e.g.
"Will AVICI trade above $6.83 in 24 hours?", so the title pattern is kept as a
fallback for those rows.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from src.pm_common.enums import MarketCategory
from src.pm_market.domain.models import Market

TITLE_PATTERN = re.compile(
    r"Will\s+([A-Za-z0-9]+)\s+trade\s+above\s+\$([0-9.]+)\s+in\s+24\s*hours\?",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class PriceTrigger:
    symbol: str
    strike: Decimal


@dataclass(frozen=True)
class TimeBound:
    pass


@dataclass(frozen=True)
class ManualOnly:
    category: MarketCategory


@dataclass(frozen=True)
class Unparseable:
    reason: str


MarketKind = PriceTrigger | TimeBound | ManualOnly | Unparseable


def parse_strike(raw: str) -> Decimal | None:
    try:
        strike = Decimal(raw)
    except InvalidOperation:
        return None
    if not strike.is_finite() or strike <= 0:
        return None
    return strike


def parse_price_title(title: str) -> PriceTrigger | None:
    """Extract (SYMBOL, strike) from a legacy auto-generated title."""
    match = TITLE_PATTERN.search(title or "")
    if match is None:
        return None
    strike = parse_strike(match.group(2))
    if strike is None:
        return None
    return PriceTrigger(symbol=match.group(1).upper(), strike=strike)


def classify(
    title: str,
    category: MarketCategory,
    symbol: str | None = None,
    strike: Decimal | None = None,
) -> MarketKind:
    if category.is_manual_only:
        return ManualOnly(category)
    if not category.is_price_triggered:
        return TimeBound()

    if symbol and strike is not None and strike > 0:
        return PriceTrigger(symbol=symbol.strip().upper(), strike=strike)

    trigger = parse_price_title(title)
    if trigger is None:
        return Unparseable(f"title does not match price pattern: {title!r}")
    return trigger


def classify_market(market: Market) -> MarketKind:
    return classify(market.title, market.category, market.symbol, market.strike_price)
