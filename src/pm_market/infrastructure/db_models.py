"""SQLAlchemy ORM models for the settlement tables.

Used for type reference only; persistence.py and ledger.py use raw text() SQL.
Alembic migrations (001-003) are the authoritative DDL source; column types
and lengths here mirror them.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import ARRAY, BigInteger, Boolean, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.pm_common.database import Base

_AMOUNT = Numeric(38, 18)
_TIMESTAMPTZ = DateTime(timezone=True)


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    points: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(_TIMESTAMPTZ, nullable=False)


class MarketORM(Base):
    __tablename__ = "markets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    options: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False)
    category: Mapped[str | None] = mapped_column(String(64))
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False)
    token_pool_yes: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    token_pool_no: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    pot: Mapped[int] = mapped_column(BigInteger, nullable=False)
    symbol: Mapped[str | None] = mapped_column(String(32))
    strike_price: Mapped[Decimal | None] = mapped_column(_AMOUNT)
    ends_at: Mapped[datetime | None] = mapped_column(_TIMESTAMPTZ)
    winning_option: Mapped[str | None] = mapped_column(String(100))
    resolved_at: Mapped[datetime | None] = mapped_column(_TIMESTAMPTZ)
    created_at: Mapped[datetime] = mapped_column(_TIMESTAMPTZ, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(_TIMESTAMPTZ, nullable=False)


class BetORM(Base):
    __tablename__ = "bets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    market_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("markets.id"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    option: Mapped[str] = mapped_column(String(100), nullable=False)
    token_stake: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    stars_stake: Mapped[int] = mapped_column(BigInteger, nullable=False)
    points_stake: Mapped[int] = mapped_column(BigInteger, nullable=False)
    token_payout: Mapped[Decimal | None] = mapped_column(_AMOUNT)
    points_payout: Mapped[int | None] = mapped_column(BigInteger)
    created_at: Mapped[datetime] = mapped_column(_TIMESTAMPTZ, nullable=False)


class PoolBalanceORM(Base):
    __tablename__ = "pool_balances"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    balance: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(_TIMESTAMPTZ, nullable=False)


class WheelPoolORM(Base):
    __tablename__ = "wheel_pool"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    balance: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)


class WalletTransactionORM(Base):
    __tablename__ = "wallet_transactions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    meta: Mapped[dict] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(_TIMESTAMPTZ, nullable=False)
