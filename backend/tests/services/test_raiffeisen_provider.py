# backend/tests/services/test_raiffeisen_provider.py
"""
Tests for the RaiffeisenCZProvider HTML scraper.

Outbound requests go through httpx.MockTransport; each test serves the
stock, fund and certificate pages it needs and everything else 404s.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import httpx
import pytest

from app.services.market_data.raiffeisen_cz import RaiffeisenCZProvider

STOCK_PATH = "/en/produkt/stock/"
FUND_PATH = "/en/produkt/fund/"
CERTIFICATE_PATH = "/en/produkt/certificate-rcb/"


# =============================================================================
# HTML FIXTURES
# =============================================================================

def stock_page(quote: str, currency: str = "CZK") -> str:
    return f"""
    <html><body>
      <ul class="striped-list">
        <li><span class="striped-list-label">Quote</span><span class="striped-list-value">{quote}</span></li>
        <li><span class="striped-list-label">Currency</span><span class="striped-list-value">{currency}</span></li>
      </ul>
    </body></html>
    """


def fund_page(price: str, currency: str = "CZK") -> str:
    return f"""
    <html><body>
      <div class="top-info">
        <div class="top-info-label">Price</div><div class="top-info-value">{price}</div>
        <div class="top-info-label">Currency</div><div class="top-info-value">{currency}</div>
      </div>
    </body></html>
    """


def certificate_page(nominal: str, bid: str | None, currency: str = "CZK") -> str:
    bid_html = (
        f'<div class="top-info-label">Bid</div><div class="top-info-value">{bid}</div>'
        if bid is not None else ""
    )
    return f"""
    <html><body>
      <div class="top-info">{bid_html}</div>
      <ul>
        <li><span class="striped-list-label">Denomination / nominal</span><span class="striped-list-value">{nominal}</span></li>
        <li><span class="striped-list-label">Product currency</span><span class="striped-list-value">{currency}</span></li>
      </ul>
    </body></html>
    """


def html(body: str) -> httpx.Response:
    return httpx.Response(200, text=body, headers={"Content-Type": "text/html"})


@pytest.fixture
def provider(mock_http) -> RaiffeisenCZProvider:
    return RaiffeisenCZProvider(client=mock_http.client())


# =============================================================================
# TESTS
# =============================================================================

class TestRaiffeisenProviderBasics:

    def test_name(self, provider):
        assert provider.name == "Raiffeisen CZ"
        assert provider.get_provider_name() == "Raiffeisen CZ"

    def test_always_available(self, provider):
        assert provider.is_available() is True

    def test_empty_symbol_list_makes_no_requests(self, provider, mock_http):
        assert provider.fetch_asset_prices([], "CZK") == []
        assert mock_http.requests == []


class TestStockPath:

    def test_stock_price_parsed(self, provider, mock_http):
        """'1,234.56' on the stock page resolves to 1234.56."""
        mock_http.add("GET", STOCK_PATH, html(stock_page("1,234.56")))

        quotes = provider.fetch_asset_prices(["CZ0008019106"], "CZK")

        assert len(quotes) == 1
        assert quotes[0].symbol == "CZ0008019106"
        assert quotes[0].price == Decimal("1234.56")
        assert quotes[0].currency == "CZK"

    def test_isin_sent_as_query_parameter(self, provider, mock_http):
        mock_http.add("GET", STOCK_PATH, html(stock_page("10")))

        provider.fetch_asset_prices(["CZ0008019106"], "CZK")

        assert mock_http.requests[0].url.params["ISIN"] == "CZ0008019106"

    def test_stock_hit_skips_other_pages(self, provider, mock_http):
        mock_http.add("GET", STOCK_PATH, html(stock_page("500")))

        provider.fetch_asset_prices(["CZ0008019106"], "CZK")

        assert mock_http.paths() == [STOCK_PATH]

    def test_price_converted_to_target_currency(self, mock_http):
        converter = MagicMock()
        converter.convert.return_value = Decimal("25.00")
        provider = RaiffeisenCZProvider(client=mock_http.client(), converter=converter)
        mock_http.add("GET", STOCK_PATH, html(stock_page("1.00", currency="EUR")))

        quotes = provider.fetch_asset_prices(["AT0000A1TW21"], "CZK")

        converter.convert.assert_called_once_with(Decimal("1.00"), "EUR", "CZK")
        assert quotes[0].price == Decimal("25.00")


class TestFundPath:

    def test_fund_used_when_stock_page_missing(self, provider, mock_http):
        mock_http.add("GET", FUND_PATH, html(fund_page("1.2345")))

        quotes = provider.fetch_asset_prices(["CZ0008474053"], "CZK")

        assert [q.price for q in quotes] == [Decimal("1.2345")]
        assert mock_http.paths() == [STOCK_PATH, FUND_PATH]

    def test_zero_stock_price_falls_through_to_fund(self, provider, mock_http):
        """An explicit 0 is not a price; the next path is tried."""
        mock_http.add("GET", STOCK_PATH, html(stock_page("0")))
        mock_http.add("GET", FUND_PATH, html(fund_page("12.50")))

        quotes = provider.fetch_asset_prices(["CZ0008474053"], "CZK")

        assert [q.price for q in quotes] == [Decimal("12.50")]

    def test_mixed_batch_resolves_each_symbol_on_its_own_page(self, provider, mock_http):
        """RFINCZ is a stock, FUND1 only exists as a fund."""
        stock_pages = {"RFINCZ": stock_page("100"), "FUND1": "<html><body></body></html>"}
        mock_http.add("GET", STOCK_PATH, lambda request: html(stock_pages[request.url.params["ISIN"]]))
        mock_http.add("GET", FUND_PATH, lambda request: html(fund_page("12.50")))

        quotes = provider.fetch_asset_prices(["RFINCZ", "FUND1"], "CZK")

        assert {q.symbol: q.price for q in quotes} == {
            "RFINCZ": Decimal("100"),
            "FUND1": Decimal("12.50"),
        }
        requested = [(r.url.path, r.url.params["ISIN"]) for r in mock_http.requests]
        assert requested == [
            (STOCK_PATH, "RFINCZ"),
            (STOCK_PATH, "FUND1"),
            (FUND_PATH, "FUND1"),
        ]


class TestCertificatePath:

    def test_certificate_price_is_nominal_times_bid_percent(self, provider, mock_http):
        """Nominal 1,000.00 at a bid of 95.50 % is worth 955."""
        mock_http.add("GET", CERTIFICATE_PATH, html(certificate_page("1,000.00", "95.50")))

        quotes = provider.fetch_asset_prices(["AT0000A2XYZ1"], "CZK")

        assert len(quotes) == 1
        assert quotes[0].price == Decimal("955")

    def test_certificate_without_bid_is_omitted(self, provider, mock_http):
        mock_http.add("GET", CERTIFICATE_PATH, html(certificate_page("1,000.00", None)))

        assert provider.fetch_asset_prices(["AT0000A2XYZ1"], "CZK") == []

    def test_all_three_pages_tried_before_giving_up(self, provider, mock_http):
        provider.fetch_asset_prices(["RFINCZ"], "CZK")

        assert mock_http.paths() == [STOCK_PATH, FUND_PATH, CERTIFICATE_PATH]


class TestFailures:

    def test_http_errors_yield_nothing(self, provider, mock_http):
        """404 on every page means the symbol is omitted."""
        assert provider.fetch_asset_prices(["UNKNOWN"], "CZK") == []

    def test_server_error_yields_nothing(self, provider, mock_http):
        for path in (STOCK_PATH, FUND_PATH, CERTIFICATE_PATH):
            mock_http.add("GET", path, httpx.Response(500, text="boom"))

        assert provider.fetch_asset_prices(["CZ0008019106"], "CZK") == []

    def test_network_error_yields_nothing(self, provider, mock_http):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        for path in (STOCK_PATH, FUND_PATH, CERTIFICATE_PATH):
            mock_http.add("GET", path, refuse)

        assert provider.fetch_asset_prices(["CZ0008019106"], "CZK") == []

    def test_timeout_yields_nothing(self, provider, mock_http):
        def time_out(request):
            raise httpx.ReadTimeout("timed out", request=request)

        for path in (STOCK_PATH, FUND_PATH, CERTIFICATE_PATH):
            mock_http.add("GET", path, time_out)

        assert provider.fetch_asset_prices(["CZ0008019106"], "CZK") == []

    def test_empty_html_yields_nothing(self, provider, mock_http):
        for path in (STOCK_PATH, FUND_PATH, CERTIFICATE_PATH):
            mock_http.add("GET", path, html(""))

        assert provider.fetch_asset_prices(["CZ0008019106"], "CZK") == []

    def test_zero_everywhere_is_reported_invalid(self, provider, mock_http):
        mock_http.add("GET", STOCK_PATH, html(stock_page("0")))
        mock_http.add("GET", FUND_PATH, html(fund_page("0")))

        lookup = provider.lookup_prices(["CZ0008019106"], "CZK")

        assert lookup.quotes == []
        assert "CZ0008019106" in lookup.invalid

    def test_one_bad_symbol_does_not_affect_others(self, provider, mock_http):
        def by_isin(request):
            if request.url.params["ISIN"] == "GOOD":
                return html(stock_page("100"))
            return httpx.Response(404)

        mock_http.add("GET", STOCK_PATH, by_isin)

        quotes = provider.fetch_asset_prices(["BAD", "GOOD"], "CZK")

        assert [q.symbol for q in quotes] == ["GOOD"]
