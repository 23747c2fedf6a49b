"""ORM reference models must cover every column the raw SQL touches."""

import pytest

from src.pm_common.database import Base
from src.pm_market.infrastructure import db_models  # noqa: F401  registers tables


@pytest.mark.parametrize(
    ("table", "columns"),
    [
        (
            "markets",
            {
                "id", "title", "options", "category", "status", "resolved",
                "token_pool_yes", "token_pool_no", "pot", "ends_at", "symbol",
                "strike_price", "winning_option", "resolved_at", "created_at", "updated_at",
            },
        ),
        (
            "bets",
            {
                "id", "market_id", "user_id", "option", "token_stake", "stars_stake",
                "points_stake", "token_payout", "points_payout", "created_at",
            },
        ),
        ("users", {"id", "points"}),
        ("pool_balances", {"id", "balance", "updated_at"}),
        ("wheel_pool", {"id", "balance"}),
        ("wallet_transactions", {"id", "user_id", "type", "amount", "meta", "created_at"}),
    ],
)
def test_table_columns(table: str, columns: set[str]) -> None:
    assert table in Base.metadata.tables
    assert columns <= set(Base.metadata.tables[table].columns.keys())


@pytest.mark.parametrize(
    ("table", "column", "length"),
    [
        ("markets", "id", 64),
        ("markets", "title", 500),
        ("markets", "status", 20),
        ("markets", "symbol", 32),
        ("markets", "winning_option", 100),
        ("bets", "market_id", 64),
        ("bets", "option", 100),
        ("pool_balances", "id", 32),
        ("wallet_transactions", "type", 32),
    ],
)
def test_varchar_lengths_match_migrations(table: str, column: str, length: int) -> None:
    assert Base.metadata.tables[table].columns[column].type.length == length


def test_timestamps_are_timezone_aware() -> None:
    """Every timestamp column is TIMESTAMPTZ in the migrations."""
    found = 0
    for table in Base.metadata.tables.values():
        for column in table.columns:
            if column.name.endswith("_at"):
                found += 1
                assert column.type.timezone is True, f"{table.name}.{column.name}"
    assert found == 8
