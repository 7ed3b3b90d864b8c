# backend/tests/services/test_yahoo_provider.py
"""
Tests for the YahooFinanceProvider.

Note: These tests mock the yfinance lookup to avoid actual API calls.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from app.services.market_data.yahoo import YahooFinanceProvider


@pytest.fixture
def provider() -> YahooFinanceProvider:
    return YahooFinanceProvider()


def with_infos(provider: YahooFinanceProvider, infos: dict):
    """Patch the yfinance lookup to serve `infos` (symbol -> info dict or exception)."""

    def fake_info(symbol):
        value = infos.get(symbol, {})
        if isinstance(value, Exception):
            raise value
        return value

    return patch.object(provider, "_fetch_quote_info", side_effect=fake_info)


class TestYahooProviderInit:
    """Tests for provider initialization."""

    def test_provider_name(self, provider):
        assert provider.name == "Yahoo Finance"

    def test_always_available(self, provider):
        assert provider.is_available() is True

    def test_takes_no_timeout(self):
        with pytest.raises(TypeError):
            YahooFinanceProvider(timeout=10)


class TestYahooLookup:

    def test_market_price_in_quote_currency(self, provider):
        with with_infos(provider, {"AAPL": {"regularMarketPrice": 189.5, "currency": "USD"}}):
            quotes = provider.fetch_asset_prices(["AAPL"], "USD")

        assert len(quotes) == 1
        assert quotes[0].price == Decimal("189.5")
        assert quotes[0].currency == "USD"

    def test_foreign_quote_converted(self):
        converter = MagicMock()
        converter.convert.return_value = Decimal("2750.00")
        provider = YahooFinanceProvider(converter=converter)

        with with_infos(provider, {"SAP.DE": {"regularMarketPrice": 110, "currency": "EUR"}}):
            quotes = provider.fetch_asset_prices(["SAP.DE"], "CZK")

        converter.convert.assert_called_once_with(Decimal("110"), "EUR", "CZK")
        assert quotes[0].price == Decimal("2750.00")

    def test_missing_currency_defaults_to_usd(self):
        converter = MagicMock()
        provider = YahooFinanceProvider(converter=converter)

        with with_infos(provider, {"AAPL": {"regularMarketPrice": 10}}):
            quotes = provider.fetch_asset_prices(["AAPL"], "USD")

        converter.convert.assert_not_called()
        assert quotes[0].price == Decimal("10")

    def test_empty_info_omitted(self, provider):
        with with_infos(provider, {}):
            assert provider.fetch_asset_prices(["NOPE"], "USD") == []

    def test_zero_price_invalid(self, provider):
        with with_infos(provider, {"DELISTED": {"regularMarketPrice": 0, "currency": "USD"}}):
            lookup = provider.lookup_prices(["DELISTED"], "USD")

        assert lookup.quotes == []
        assert "DELISTED" in lookup.invalid

    def test_errors_are_contained_per_symbol(self, provider):
        infos = {
            "BROKEN": RuntimeError("Too Many Requests. Rate limited."),
            "MSFT": {"regularMarketPrice": 410, "currency": "USD"},
        }
        with with_infos(provider, infos):
            quotes = provider.fetch_asset_prices(["BROKEN", "MSFT"], "USD")

        assert [q.symbol for q in quotes] == ["MSFT"]

    def test_fetch_uses_yfinance_ticker(self, provider):
        ticker = MagicMock()
        ticker.info = {"regularMarketPrice": 5, "currency": "USD"}

        with patch("app.services.market_data.yahoo.yf.Ticker", return_value=ticker) as ticker_cls:
            quotes = provider.fetch_asset_prices(["F"], "USD")

        ticker_cls.assert_called_once_with("F")
        assert quotes[0].price == Decimal("5")
