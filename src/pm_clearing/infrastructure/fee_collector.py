"""Fee pool crediting: additive upserts into pool_balances.

Called from the ledger writer within the market's settlement transaction.
"""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_clearing.domain.fee import FeeSplit

LEGACY_WHEEL_POOL_ID = "main_pool"

_CREDIT_POOL_SQL = text("""
    INSERT INTO pool_balances (id, balance, updated_at)
    VALUES (:pool_id, :amount, NOW())
    ON CONFLICT (id) DO UPDATE
    SET balance = pool_balances.balance + EXCLUDED.balance,
        updated_at = NOW()
""")

_CREDIT_LEGACY_WHEEL_SQL = text("""
    INSERT INTO wheel_pool (id, balance)
    VALUES (:pool_id, :amount)
    ON CONFLICT (id) DO UPDATE
    SET balance = wheel_pool.balance + EXCLUDED.balance
""")


async def credit_fee_pools(
    fee_split: FeeSplit,
    db: AsyncSession,
    mirror_legacy_wheel: bool = True,
) -> None:
    """Add each share to its pool; pools are created on first credit."""
    if fee_split.total <= 0:
        return
    for pool_id, amount in fee_split.increments().items():
        await db.execute(_CREDIT_POOL_SQL, {"pool_id": pool_id.value, "amount": amount})
    if mirror_legacy_wheel and fee_split.wheel > 0:
        await db.execute(
            _CREDIT_LEGACY_WHEEL_SQL,
            {"pool_id": LEGACY_WHEEL_POOL_ID, "amount": fee_split.wheel},
        )
