"""Per-market close decision, evaluated once per pass.

    ACTIVE + PriceTrigger, price >= strike    → RESOLVE (option index 0 wins)
    ACTIVE + PriceTrigger, no price           → SKIP_NO_PRICE
    ACTIVE + PriceTrigger, price < strike     → HOLD
    ACTIVE + Unparseable                      → SKIP_NO_MATCH
    ACTIVE + ManualOnly                       → SKIP_UNSUPPORTED
    ACTIVE + TimeBound, now > ends_at         → EXPIRE (PAUSED, resolved untouched)
    anything else                             → HOLD
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.pm_common.enums import SettlementAction
from src.pm_market.domain.classifier import (
    ManualOnly,
    MarketKind,
    PriceTrigger,
    TimeBound,
    Unparseable,
)
from src.pm_market.domain.models import Market
from src.pm_pricing.domain.batch import PriceSnapshot


@dataclass(frozen=True)
class Decision:
    action: SettlementAction
    winning_option: str | None = None
    current_price: Decimal | None = None


_HOLD = Decision(SettlementAction.HOLD)


def decide(
    market: Market,
    kind: MarketKind,
    prices: PriceSnapshot,
    now: datetime,
) -> Decision:
    if not market.is_open():
        return _HOLD

    if isinstance(kind, Unparseable):
        return Decision(SettlementAction.SKIP_NO_MATCH)
    if isinstance(kind, ManualOnly):
        return Decision(SettlementAction.SKIP_UNSUPPORTED)

    if isinstance(kind, PriceTrigger):
        price = prices.get(kind.symbol)
        if price is None:
            return Decision(SettlementAction.SKIP_NO_PRICE)
        if price >= kind.strike:
            # Index 0 is assumed to be the "above strike" outcome.
            return Decision(
                SettlementAction.RESOLVE,
                winning_option=market.options[0],
                current_price=price,
            )
        return Decision(SettlementAction.HOLD, current_price=price)

    if isinstance(kind, TimeBound) and market.ends_at is not None and now > market.ends_at:
        return Decision(SettlementAction.EXPIRE)
    return _HOLD
