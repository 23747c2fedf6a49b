"""Unit tests for pm_clearing fee_collector (pool_balances upserts)."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.pm_clearing.domain.config import DEFAULT_FEE_SPLIT
from src.pm_clearing.domain.fee import split_platform_fee
from src.pm_clearing.infrastructure.fee_collector import (
    LEGACY_WHEEL_POOL_ID,
    credit_fee_pools,
)


@pytest.mark.asyncio
async def test_credits_four_pools_and_legacy_wheel() -> None:
    db = AsyncMock()
    split = split_platform_fee(Decimal("10"), DEFAULT_FEE_SPLIT)

    await credit_fee_pools(split, db)

    calls = db.execute.call_args_list
    assert len(calls) == 5
    credited = {c.args[1]["pool_id"]: c.args[1]["amount"] for c in calls[:4]}
    assert credited == {
        "leaderboard": Decimal("1.5"),
        "referral": Decimal("1.0"),
        "wheel": Decimal("0.5"),
        "treasury": Decimal("7.0"),
    }
    assert calls[4].args[1] == {"pool_id": LEGACY_WHEEL_POOL_ID, "amount": Decimal("0.5")}


@pytest.mark.asyncio
async def test_increments_are_additive() -> None:
    """Upsert adds to the existing balance rather than overwriting it."""
    db = AsyncMock()
    await credit_fee_pools(split_platform_fee(Decimal("10"), DEFAULT_FEE_SPLIT), db)
    sql = str(db.execute.call_args_list[0].args[0])
    assert "pool_balances.balance + EXCLUDED.balance" in sql


@pytest.mark.asyncio
async def test_legacy_wheel_mirror_can_be_disabled() -> None:
    db = AsyncMock()
    await credit_fee_pools(
        split_platform_fee(Decimal("10"), DEFAULT_FEE_SPLIT), db, mirror_legacy_wheel=False
    )
    assert db.execute.await_count == 4


@pytest.mark.asyncio
async def test_zero_fee_writes_nothing() -> None:
    db = AsyncMock()
    await credit_fee_pools(split_platform_fee(Decimal("0"), DEFAULT_FEE_SPLIT), db)
    db.execute.assert_not_awaited()
