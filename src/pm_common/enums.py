"""Global enums: must match DB CHECK constraints exactly.

Schema source: alembic/versions/002_create_markets_and_bets.py
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class MarketStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"  # betting closed, waiting for manual settlement
    RESOLVED = "RESOLVED"
    CANCELLED = "CANCELLED"


class MarketCategory(str, Enum):
    CRYPTO = "CRYPTO"
    MEME_COIN = "MEME_COIN"
    TRENDING_CRYPTO = "TRENDING_CRYPTO"
    SPORTS = "SPORTS"
    POLITICS = "POLITICS"
    ENTERTAINMENT = "ENTERTAINMENT"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: str | None) -> "MarketCategory":
        """Map a stored category string onto the closed enum.

        Stored values are case-insensitive ('crypto' and 'CRYPTO' both exist).
        NULL and unknown strings fall back to OTHER.
        """
        if not raw:
            return cls.OTHER
        try:
            return cls(raw.strip().upper())
        except ValueError:
            logger.warning("Unknown market category %r, treating as OTHER", raw)
            return cls.OTHER

    @property
    def is_price_triggered(self) -> bool:
        return self in _PRICE_TRIGGERED

    @property
    def is_manual_only(self) -> bool:
        return self in _MANUAL_ONLY


_PRICE_TRIGGERED = frozenset(
    {MarketCategory.CRYPTO, MarketCategory.MEME_COIN, MarketCategory.TRENDING_CRYPTO}
)
_MANUAL_ONLY = frozenset({MarketCategory.SPORTS})


class PoolId(str, Enum):
    """Fee sub-accounts; values are the pool_balances primary keys."""
    LEADERBOARD = "leaderboard"
    REFERRAL = "referral"
    WHEEL = "wheel"
    TREASURY = "treasury"


class WalletTransactionType(str, Enum):
    PREDICTION_WIN = "prediction_win"


class SettlementAction(str, Enum):
    """Per-market outcome of one decision pass."""
    RESOLVE = "RESOLVE"
    EXPIRE = "EXPIRE"
    SKIP_NO_MATCH = "SKIP_NO_MATCH"
    SKIP_NO_PRICE = "SKIP_NO_PRICE"
    SKIP_UNSUPPORTED = "SKIP_UNSUPPORTED"
    HOLD = "HOLD"
