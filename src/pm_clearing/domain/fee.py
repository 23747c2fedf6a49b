"""Platform fee and its four-way split across the fee pools."""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from src.pm_common.enums import PoolId


@dataclass(frozen=True)
class FeeSplitRatios:
    leaderboard: Decimal
    referral: Decimal
    wheel: Decimal
    treasury: Decimal

    def __post_init__(self) -> None:
        ratios = (self.leaderboard, self.referral, self.wheel, self.treasury)
        if any(r < 0 for r in ratios):
            raise ValueError(f"Fee split ratios must be non-negative, got {ratios}")
        if sum(ratios) != Decimal(1):
            raise ValueError(f"Fee split ratios must sum to 1, got {sum(ratios)}")


@dataclass(frozen=True)
class FeeSplit:
    leaderboard: Decimal
    referral: Decimal
    wheel: Decimal
    treasury: Decimal

    @property
    def total(self) -> Decimal:
        return self.leaderboard + self.referral + self.wheel + self.treasury

    def increments(self) -> dict[PoolId, Decimal]:
        return {
            PoolId.LEADERBOARD: self.leaderboard,
            PoolId.REFERRAL: self.referral,
            PoolId.WHEEL: self.wheel,
            PoolId.TREASURY: self.treasury,
        }


def calc_platform_fee(losing_side_total: Decimal, fee_rate: Decimal) -> Decimal:
    """Fee is taken from the losing side only."""
    return losing_side_total * fee_rate


def split_platform_fee(platform_fee: Decimal, ratios: FeeSplitRatios) -> FeeSplit:
    """Split by ratio; treasury takes the remainder so the parts sum exactly."""
    leaderboard = platform_fee * ratios.leaderboard
    referral = platform_fee * ratios.referral
    wheel = platform_fee * ratios.wheel
    return FeeSplit(
        leaderboard=leaderboard,
        referral=referral,
        wheel=wheel,
        treasury=platform_fee - leaderboard - referral - wheel,
    )


def calc_legacy_fee(pot: int, fee_rate: Decimal) -> int:
    """House fee on the points pot, floored to whole points."""
    return int((Decimal(pot) * fee_rate).to_integral_value(rounding=ROUND_FLOOR))
