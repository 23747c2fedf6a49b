"""Settlement parameters, injected into the service at construction."""

from dataclasses import dataclass, field
from decimal import Decimal

from config.settings import Settings
from src.pm_clearing.domain.fee import FeeSplitRatios

DEFAULT_FEE_SPLIT = FeeSplitRatios(
    leaderboard=Decimal("0.15"),
    referral=Decimal("0.10"),
    wheel=Decimal("0.05"),
    treasury=Decimal("0.70"),
)


@dataclass(frozen=True)
class SettlementConfig:
    platform_fee_rate: Decimal = Decimal("0.10")
    legacy_fee_rate: Decimal = Decimal("0.05")
    fee_split: FeeSplitRatios = field(default=DEFAULT_FEE_SPLIT)
    price_lookup_concurrency: int = 5
    mirror_legacy_wheel_pool: bool = True

    def __post_init__(self) -> None:
        for name in ("platform_fee_rate", "legacy_fee_rate"):
            rate = getattr(self, name)
            if not (Decimal(0) <= rate <= Decimal(1)):
                raise ValueError(f"{name} must be within [0, 1], got {rate}")
        if self.price_lookup_concurrency < 1:
            raise ValueError("price_lookup_concurrency must be >= 1")

    @classmethod
    def from_settings(cls, s: Settings) -> "SettlementConfig":
        return cls(
            platform_fee_rate=s.PLATFORM_FEE_RATE,
            legacy_fee_rate=s.LEGACY_FEE_RATE,
            fee_split=FeeSplitRatios(
                leaderboard=s.FEE_SPLIT_LEADERBOARD,
                referral=s.FEE_SPLIT_REFERRAL,
                wheel=s.FEE_SPLIT_WHEEL,
                treasury=s.FEE_SPLIT_TREASURY,
            ),
            price_lookup_concurrency=s.PRICE_LOOKUP_CONCURRENCY,
            mirror_legacy_wheel_pool=s.MIRROR_LEGACY_WHEEL_POOL,
        )
