"""Domain models for pm_market: pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.pm_common.enums import MarketCategory, MarketStatus


@dataclass
class Bet:
    id: str
    user_id: str
    option: str
    token_stake: Decimal
    stars_stake: int
    points_stake: int
    token_payout: Decimal | None = None
    points_payout: int | None = None

    @property
    def legacy_stake(self) -> int:
        """Points-currency stake: stars when present, otherwise points."""
        return self.stars_stake or self.points_stake


@dataclass
class Market:
    id: str
    title: str
    options: tuple[str, str]  # index 0 is the "price rose above strike" outcome
    category: MarketCategory
    status: MarketStatus
    resolved: bool
    token_pool_yes: Decimal
    token_pool_no: Decimal
    pot: int
    ends_at: datetime | None
    symbol: str | None = None
    strike_price: Decimal | None = None
    winning_option: str | None = None
    resolved_at: datetime | None = None
    bets: list[Bet] = field(default_factory=list)

    def option_index(self, option: str) -> int:
        return self.options.index(option)

    def is_open(self) -> bool:
        return self.status == MarketStatus.ACTIVE and not self.resolved
