"""Price lookup contract consumed by the settlement pass."""

from decimal import Decimal
from typing import Protocol


class PriceLookupProtocol(Protocol):
    async def lookup(self, symbol: str) -> Decimal | None:
        """Current USD price for symbol, or None when unavailable."""
        ...
