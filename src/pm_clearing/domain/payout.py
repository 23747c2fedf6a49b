"""Pari-mutuel settlement: pure computation, no I/O.

Token side (Decimal):
    platform_fee = losing_side_total × fee_rate
    win_pool     = total_pool − platform_fee
    payout       = stake × win_pool / winning_side_total

Points side (int), settled independently from the market's pot:
    legacy_fee    = floor(pot × legacy_fee_rate)
    distributable = pot − legacy_fee
    payout        = floor(stake × distributable / total_winning_legacy_stake)

Nobody on the winning side is a valid state: no payouts are produced, the
fee is still split into the pools.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.pm_clearing.domain.config import SettlementConfig
from src.pm_clearing.domain.fee import (
    FeeSplit,
    calc_legacy_fee,
    calc_platform_fee,
    split_platform_fee,
)
from src.pm_market.domain.models import Bet, Market

_ZERO = Decimal(0)


@dataclass(frozen=True)
class BetPayout:
    bet_id: str
    user_id: str
    token_stake: Decimal
    token_amount: Decimal | None
    points_amount: int | None


@dataclass(frozen=True)
class SettlementResult:
    market_id: str
    winning_option: str
    winning_side_total: Decimal
    losing_side_total: Decimal
    total_pool: Decimal
    platform_fee: Decimal
    win_pool: Decimal
    payout_per_unit: Decimal | None
    fee_split: FeeSplit
    legacy_fee: int
    legacy_distributable: int
    payouts: tuple[BetPayout, ...]

    @property
    def token_paid(self) -> Decimal:
        return sum((p.token_amount or _ZERO for p in self.payouts), _ZERO)

    @property
    def points_paid(self) -> int:
        return sum(p.points_amount or 0 for p in self.payouts)


def _token_payouts(
    winning_bets: list[Bet], win_pool: Decimal, winning_side_total: Decimal
) -> dict[str, Decimal]:
    if winning_side_total <= 0:
        return {}
    out: dict[str, Decimal] = {}
    for bet in winning_bets:
        if bet.token_stake > 0:
            amount = bet.token_stake * win_pool / winning_side_total
            if amount > 0:
                out[bet.id] = amount
    return out


def _points_payouts(winning_bets: list[Bet], distributable: int) -> dict[str, int]:
    total_stake = sum(b.legacy_stake for b in winning_bets if b.legacy_stake > 0)
    if total_stake <= 0 or distributable <= 0:
        return {}
    out: dict[str, int] = {}
    for bet in winning_bets:
        if bet.legacy_stake > 0:
            amount = bet.legacy_stake * distributable // total_stake
            if amount > 0:
                out[bet.id] = amount
    return out


def calculate_settlement(
    market: Market, winning_option: str, config: SettlementConfig
) -> SettlementResult:
    """Compute every payout and fee increment for one market.

    Raises ValueError when winning_option is not one of the market's options.
    """
    if winning_option not in market.options:
        raise ValueError(
            f"Invalid winning option {winning_option!r} for market {market.id}"
        )
    yes_wins = market.option_index(winning_option) == 0
    winning_side_total = market.token_pool_yes if yes_wins else market.token_pool_no
    losing_side_total = market.token_pool_no if yes_wins else market.token_pool_yes
    total_pool = winning_side_total + losing_side_total

    platform_fee = calc_platform_fee(losing_side_total, config.platform_fee_rate)
    win_pool = total_pool - platform_fee
    fee_split = split_platform_fee(platform_fee, config.fee_split)
    payout_per_unit = win_pool / winning_side_total if winning_side_total > 0 else None

    legacy_fee = calc_legacy_fee(market.pot, config.legacy_fee_rate)
    legacy_distributable = market.pot - legacy_fee

    winning_bets = [b for b in market.bets if b.option == winning_option]
    token = _token_payouts(winning_bets, win_pool, winning_side_total)
    points = _points_payouts(winning_bets, legacy_distributable)

    payouts = tuple(
        BetPayout(
            bet_id=b.id,
            user_id=b.user_id,
            token_stake=b.token_stake,
            token_amount=token.get(b.id),
            points_amount=points.get(b.id),
        )
        for b in winning_bets
        if b.id in token or b.id in points
    )
    return SettlementResult(
        market_id=market.id,
        winning_option=winning_option,
        winning_side_total=winning_side_total,
        losing_side_total=losing_side_total,
        total_pool=total_pool,
        platform_fee=platform_fee,
        win_pool=win_pool,
        payout_per_unit=payout_per_unit,
        fee_split=fee_split,
        legacy_fee=legacy_fee,
        legacy_distributable=legacy_distributable,
        payouts=payouts,
    )
