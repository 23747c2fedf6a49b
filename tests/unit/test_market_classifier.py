"""Unit tests for pm_market classifier (price title parsing and market kinds)."""

from decimal import Decimal

from src.pm_common.enums import MarketCategory, MarketStatus
from src.pm_market.domain.classifier import (
    ManualOnly,
    PriceTrigger,
    TimeBound,
    Unparseable,
    classify,
    classify_market,
    parse_price_title,
)
from src.pm_market.domain.models import Market


class TestParsePriceTitle:
    def test_auto_generated_title(self) -> None:
        trigger = parse_price_title("Will AVICI trade above $6.83 in 24 hours?")
        assert trigger == PriceTrigger(symbol="AVICI", strike=Decimal("6.83"))

    def test_symbol_uppercased_and_spacing_tolerated(self) -> None:
        trigger = parse_price_title("will pepe  trade above $0.0000012 in 24hours?")
        assert trigger == PriceTrigger(symbol="PEPE", strike=Decimal("0.0000012"))

    def test_non_numeric_strike(self) -> None:
        assert parse_price_title("Will BTC trade above $6.8.3 in 24 hours?") is None
        assert parse_price_title("Will BTC trade above $. in 24 hours?") is None

    def test_zero_strike_rejected(self) -> None:
        assert parse_price_title("Will BTC trade above $0 in 24 hours?") is None

    def test_other_wording(self) -> None:
        assert parse_price_title("Will BTC trade below $60000 in 24 hours?") is None
        assert parse_price_title("Will BTC trade above $60000 by Friday?") is None
        assert parse_price_title("") is None


class TestClassify:
    def test_price_category_with_matching_title(self) -> None:
        kind = classify("Will SOL trade above $150 in 24 hours?", MarketCategory.TRENDING_CRYPTO)
        assert kind == PriceTrigger(symbol="SOL", strike=Decimal("150"))

    def test_price_category_with_free_text_title(self) -> None:
        kind = classify("Will SOL flip ETH this year?", MarketCategory.CRYPTO)
        assert isinstance(kind, Unparseable)

    def test_structured_fields_win_over_title(self) -> None:
        kind = classify(
            "Bitcoin 24h market", MarketCategory.CRYPTO, symbol="btc", strike=Decimal("65000")
        )
        assert kind == PriceTrigger(symbol="BTC", strike=Decimal("65000"))

    def test_structured_fields_incomplete_fall_back_to_title(self) -> None:
        kind = classify(
            "Will ETH trade above $3000 in 24 hours?", MarketCategory.CRYPTO, symbol="ETH"
        )
        assert kind == PriceTrigger(symbol="ETH", strike=Decimal("3000"))

    def test_sports_is_manual_only_even_with_price_title(self) -> None:
        kind = classify("Will BTC trade above $1 in 24 hours?", MarketCategory.SPORTS)
        assert kind == ManualOnly(MarketCategory.SPORTS)

    def test_generic_categories_are_time_bound(self) -> None:
        assert classify("Who wins the election?", MarketCategory.POLITICS) == TimeBound()
        assert classify("Anything", MarketCategory.OTHER) == TimeBound()


def test_classify_market_reads_market_fields() -> None:
    market = Market(
        id="m-1",
        title="Will AVICI trade above $6.80 in 24 hours?",
        options=("Yes", "No"),
        category=MarketCategory.MEME_COIN,
        status=MarketStatus.ACTIVE,
        resolved=False,
        token_pool_yes=Decimal(0),
        token_pool_no=Decimal(0),
        pot=0,
        ends_at=None,
    )
    assert classify_market(market) == PriceTrigger(symbol="AVICI", strike=Decimal("6.80"))
