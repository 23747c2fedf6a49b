from decimal import Decimal

import pytest

from src.pm_clearing.domain.config import DEFAULT_FEE_SPLIT
from src.pm_clearing.domain.fee import (
    FeeSplitRatios,
    calc_legacy_fee,
    calc_platform_fee,
    split_platform_fee,
)
from src.pm_common.enums import PoolId


class TestCalcPlatformFee:
    def test_ten_percent_of_losing_side(self) -> None:
        assert calc_platform_fee(Decimal("100"), Decimal("0.10")) == Decimal("10")

    def test_zero_losing_side(self) -> None:
        assert calc_platform_fee(Decimal("0"), Decimal("0.10")) == 0


class TestSplitPlatformFee:
    def test_fifteen_ten_five_seventy(self) -> None:
        split = split_platform_fee(Decimal("10"), DEFAULT_FEE_SPLIT)
        assert split.leaderboard == Decimal("1.5")
        assert split.referral == Decimal("1.0")
        assert split.wheel == Decimal("0.5")
        assert split.treasury == Decimal("7.0")

    @pytest.mark.parametrize(
        "fee", ["0", "0.01", "1", "3.3333333333", "123456.789", "0.000000000000000001"]
    )
    def test_parts_sum_exactly_to_fee(self, fee: str) -> None:
        split = split_platform_fee(Decimal(fee), DEFAULT_FEE_SPLIT)
        assert split.total == Decimal(fee)

    def test_increments_keyed_by_pool(self) -> None:
        split = split_platform_fee(Decimal("20"), DEFAULT_FEE_SPLIT)
        increments = split.increments()
        assert set(increments) == set(PoolId)
        assert increments[PoolId.TREASURY] == Decimal("14")


class TestFeeSplitRatios:
    def test_must_sum_to_one(self) -> None:
        with pytest.raises(ValueError, match="sum to 1"):
            FeeSplitRatios(Decimal("0.2"), Decimal("0.1"), Decimal("0.05"), Decimal("0.7"))

    def test_negative_ratio_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            FeeSplitRatios(Decimal("-0.1"), Decimal("0.25"), Decimal("0.15"), Decimal("0.7"))


class TestCalcLegacyFee:
    def test_five_percent_floored(self) -> None:
        # 101 * 0.05 = 5.05 → 5
        assert calc_legacy_fee(101, Decimal("0.05")) == 5

    def test_small_pot_has_no_fee(self) -> None:
        # 19 * 0.05 = 0.95 → 0
        assert calc_legacy_fee(19, Decimal("0.05")) == 0

    def test_empty_pot(self) -> None:
        assert calc_legacy_fee(0, Decimal("0.05")) == 0
