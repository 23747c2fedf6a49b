"""Unit tests for CoinGeckoPriceClient using httpx.MockTransport (no network)."""

from decimal import Decimal

import httpx
import pytest

from src.pm_pricing.infrastructure.coingecko_client import API_KEY_HEADER, CoinGeckoPriceClient

BASE_URL = "https://api.test/api/v3"


def _transport(search: dict, prices: dict, seen: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/search"):
            return httpx.Response(200, json=search)
        if request.url.path.endswith("/simple/price"):
            return httpx.Response(200, json=prices)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_lookup_picks_best_ranked_exact_symbol() -> None:
    seen: list[httpx.Request] = []
    search = {
        "coins": [
            {"id": "avici-fake", "symbol": "avici", "market_cap_rank": 900},
            {"id": "avici", "symbol": "AVICI", "market_cap_rank": 410},
            {"id": "avicii-token", "symbol": "AVICII", "market_cap_rank": 1},
        ]
    }
    transport = _transport(search, {"avici": {"usd": 6.83}}, seen)
    async with CoinGeckoPriceClient("key-1", BASE_URL, 5.0, transport=transport) as client:
        price = await client.lookup("avici")

    assert price == Decimal("6.83")
    assert seen[0].url.params["query"] == "AVICI"
    assert seen[1].url.params["ids"] == "avici"
    assert seen[1].url.params["vs_currencies"] == "usd"
    assert all(r.headers[API_KEY_HEADER] == "key-1" for r in seen)


@pytest.mark.asyncio
async def test_unknown_symbol_returns_none() -> None:
    seen: list[httpx.Request] = []
    transport = _transport({"coins": []}, {}, seen)
    async with CoinGeckoPriceClient("k", BASE_URL, transport=transport) as client:
        assert await client.lookup("NOPE") is None
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_missing_quote_returns_none() -> None:
    seen: list[httpx.Request] = []
    transport = _transport({"coins": [{"id": "btc", "symbol": "btc"}]}, {"btc": {}}, seen)
    async with CoinGeckoPriceClient("k", BASE_URL, transport=transport) as client:
        assert await client.lookup("BTC") is None


@pytest.mark.asyncio
async def test_http_error_propagates() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(429))
    async with CoinGeckoPriceClient("k", BASE_URL, transport=transport) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.lookup("BTC")
