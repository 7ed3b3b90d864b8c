# backend/tests/services/test_price_provider_base.py
"""
Tests for the price provider contract: PriceQuote validation, price
helpers and the fetch_asset_prices wrapper.
"""

from decimal import Decimal

import pytest

from app.services.market_data.base import PriceLookup, PriceQuote, is_valid_price, to_decimal
from tests.conftest import FakePriceProvider


class TestPriceQuote:

    def test_valid_quote(self):
        quote = PriceQuote(symbol="AAPL", price=Decimal("1.5"), currency="USD")

        assert quote.price == Decimal("1.5")

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-1")])
    def test_non_positive_price_rejected(self, price):
        with pytest.raises(ValueError):
            PriceQuote(symbol="AAPL", price=price, currency="USD")

    def test_symbol_and_currency_required(self):
        with pytest.raises(ValueError):
            PriceQuote(symbol="", price=Decimal("1"), currency="USD")
        with pytest.raises(ValueError):
            PriceQuote(symbol="AAPL", price=Decimal("1"), currency="")


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        (1, True),
        ("0.01", True),
        (Decimal("3"), True),
        (0, False),
        ("0", False),
        (-5, False),
        (None, False),
        (True, False),
        ("abc", False),
        (float("nan"), False),
        (float("inf"), False),
    ])
    def test_is_valid_price(self, value, expected):
        assert is_valid_price(value) is expected

    @pytest.mark.parametrize("value,expected", [
        (150, Decimal("150")),
        (1.25, Decimal("1.25")),
        ("42.10", Decimal("42.10")),
        (None, None),
        (False, None),
        (float("nan"), None),
        ("n/a", None),
    ])
    def test_to_decimal(self, value, expected):
        assert to_decimal(value) == expected

    def test_lookup_keeps_valid_quote_over_invalid(self):
        lookup = PriceLookup()
        lookup.mark_invalid("AAPL", "zero")
        lookup.add_quote(PriceQuote("AAPL", Decimal("1"), "USD"))
        lookup.mark_invalid("AAPL", "zero again")

        assert lookup.invalid == {}
        assert lookup.found_symbols == {"AAPL"}


class TestFetchAssetPrices:

    def test_output_is_subset_of_input(self):
        provider = FakePriceProvider(prices={"AAPL": "1", "MSFT": "2"}, invalid={"ZERO": "zero"})
        symbols = ["AAPL", "ZERO", "NOPE", "MSFT"]

        quotes = provider.fetch_asset_prices(symbols, "USD")

        assert len(quotes) <= len(symbols)
        assert {q.symbol for q in quotes} == {"AAPL", "MSFT"}
        assert all(q.price > 0 for q in quotes)

    def test_provider_name(self):
        assert FakePriceProvider(name="Fake").get_provider_name() == "Fake"
