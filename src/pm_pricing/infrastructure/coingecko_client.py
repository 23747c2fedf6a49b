"""CoinGecko price client: implements PriceLookupProtocol over httpx.

Symbol lookup is two calls: /search resolves the ticker to a coin id
(exact symbol match, best market-cap rank wins), then /simple/price
returns the USD quote. HTTP errors propagate; the batch layer records
them as "no price" for the pass.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-cg-demo-api-key"


def _pick_coin_id(symbol: str, coins: list[dict[str, Any]]) -> str | None:
    matches = [c for c in coins if str(c.get("symbol", "")).upper() == symbol]
    if not matches:
        return None
    # Unranked coins sort last.
    matches.sort(key=lambda c: c.get("market_cap_rank") or float("inf"))
    return matches[0].get("id")


def _parse_price(value: object) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        return None
    return price if price.is_finite() and price > 0 else None


class CoinGeckoPriceClient:
    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.PRICE_API_BASE_URL).rstrip("/"),
            headers={API_KEY_HEADER: api_key, "accept": "application/json"},
            timeout=timeout or settings.PRICE_API_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "CoinGeckoPriceClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def lookup(self, symbol: str) -> Decimal | None:
        symbol = symbol.upper()
        r = await self._client.get("/search", params={"query": symbol})
        r.raise_for_status()
        coin_id = _pick_coin_id(symbol, r.json().get("coins") or [])
        if coin_id is None:
            logger.info("CoinGecko has no coin for symbol %s", symbol)
            return None

        r = await self._client.get(
            "/simple/price", params={"ids": coin_id, "vs_currencies": "usd"}
        )
        r.raise_for_status()
        quote = r.json().get(coin_id) or {}
        return _parse_price(quote.get("usd"))
