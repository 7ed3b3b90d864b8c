# backend/app/services/market_data/raiffeisen_cz.py
"""
Raiffeisen CZ product-page price provider.

Raiffeisenbank CZ publishes prices for the stocks, funds and certificates it
distributes only as HTML product pages keyed by ISIN. There is no API, so
each symbol is resolved by fetching and parsing up to three pages, in order:

1. Stock page:        "Quote" / "Currency" in the striped list
2. Fund page:         "Price" / "Currency" in the top info block
3. Certificate page:  "Denomination / nominal" and "Product currency" in the
                      striped list, "Bid" (percent of par) in the top info
                      block; price = nominal * bid / 100

The first path yielding a strictly positive price wins. Fetch failures
(non-2xx, network errors, timeouts) and pages without the expected labels
just move on to the next path. A symbol no path can price is omitted.

Labels and CSS classes follow the site's current English markup; a markup
change makes symbols silently disappear from results, which shows up as
"No valid price found" warnings in the logs.
"""

import logging
from decimal import Decimal

import httpx
from bs4 import BeautifulSoup

from app.services.http_client import build_http_client
from app.services.market_data.base import PriceLookup, PriceProvider
from app.services.market_data.currency import CurrencyConverter
from app.utils.number_format import unformat_number

logger = logging.getLogger(__name__)

STOCK_URL = "https://investice.rb.cz/en/produkt/stock"
FUND_URL = "https://investice.rb.cz/en/produkt/fund"
CERTIFICATE_URL = "https://investice.rb.cz/en/produkt/certificate-rcb"

# (label class, value class) pairs; a value element directly follows its label
STRIPED_LIST = ("striped-list-label", "striped-list-value")
TOP_INFO = ("top-info-label", "top-info-value")


class RaiffeisenCZProvider(PriceProvider):
    """
    Scrapes instrument prices from investice.rb.cz.

    Symbols are ISINs (e.g. "AT0000A1TW21"). Symbols are resolved one after
    another, each path strictly after the previous one failed.
    """

    def __init__(
            self,
            timeout: float = 10.0,
            client: httpx.Client | None = None,
            converter: CurrencyConverter | None = None,
    ):
        self._client = client or build_http_client(timeout=timeout)
        self._converter = converter
        logger.info(f"RaiffeisenCZProvider initialized (timeout={timeout}s)")

    @property
    def name(self) -> str:
        return "Raiffeisen CZ"

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        lookup = PriceLookup()
        for symbol in symbols:
            try:
                self._resolve_symbol(lookup, symbol, target_currency)
            except Exception as e:
                logger.error(f"Error fetching price for {symbol} from Raiffeisen CZ: {e}")
        return lookup

    def _resolve_symbol(self, lookup: PriceLookup, symbol: str, target_currency: str) -> None:
        attempts = (
            ("stock", self._stock_price),
            ("fund", self._fund_price),
            ("certificate", self._certificate_price),
        )

        for kind, fetch_price in attempts:
            price = fetch_price(symbol, target_currency)
            if price is None:
                continue
            if self._accept(lookup, symbol, price, target_currency):
                logger.info(f"Raiffeisen CZ: {symbol} priced as {kind} at {price} {target_currency}")
                return

        logger.warning(f"No valid price found for {symbol} on Raiffeisen CZ")

    # =========================================================================
    # PATHS
    # =========================================================================

    def _stock_price(self, symbol: str, target_currency: str) -> Decimal | None:
        soup = self._load_page(STOCK_URL, symbol)
        if soup is None:
            return None

        price = unformat_number(_labelled_value(soup, STRIPED_LIST, "Quote"))
        currency = _labelled_value(soup, STRIPED_LIST, "Currency")
        return self._in_target_currency(price, currency, target_currency)

    def _fund_price(self, symbol: str, target_currency: str) -> Decimal | None:
        soup = self._load_page(FUND_URL, symbol)
        if soup is None:
            return None

        price = unformat_number(_labelled_value(soup, TOP_INFO, "Price"))
        currency = _labelled_value(soup, TOP_INFO, "Currency")
        return self._in_target_currency(price, currency, target_currency)

    def _certificate_price(self, symbol: str, target_currency: str) -> Decimal | None:
        soup = self._load_page(CERTIFICATE_URL, symbol)
        if soup is None:
            return None

        nominal = unformat_number(_labelled_value(soup, STRIPED_LIST, "Denomination / nominal"))
        currency = _labelled_value(soup, STRIPED_LIST, "Product currency")
        bid = unformat_number(_labelled_value(soup, TOP_INFO, "Bid"))

        if nominal is None or bid is None:
            logger.debug(f"Certificate page for {symbol} lacks nominal or bid")
            return None

        nominal = self._in_target_currency(nominal, currency, target_currency)
        return nominal * bid / Decimal(100)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _load_page(self, base_url: str, symbol: str) -> BeautifulSoup | None:
        """Fetch and parse a product page; None on any fetch failure."""
        try:
            response = self._client.get(f"{base_url}/", params={"ISIN": symbol})
        except httpx.TimeoutException:
            logger.warning(f"Timeout fetching {base_url} for {symbol}")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Request to {base_url} for {symbol} failed: {e}")
            return None

        if not response.is_success:
            logger.debug(f"{base_url} returned HTTP {response.status_code} for {symbol}")
            return None

        return BeautifulSoup(response.text, "html.parser")

    def _in_target_currency(
            self,
            amount: Decimal | None,
            currency: str,
            target_currency: str,
    ) -> Decimal | None:
        if amount is None or amount <= 0:
            return amount
        if not currency or currency.upper() == target_currency.upper():
            return amount
        if self._converter is None:
            logger.warning(
                f"No currency converter configured; keeping {amount} {currency} "
                f"as {target_currency}"
            )
            return amount
        return self._converter.convert(amount, currency.upper(), target_currency)


def _labelled_value(soup: BeautifulSoup, classes: tuple[str, str], label_text: str) -> str:
    """
    Text of the value element that directly follows the first label
    containing `label_text`, or "" when there is none.
    """
    label_class, value_class = classes
    for label in soup.find_all(class_=label_class):
        if label_text not in label.get_text():
            continue
        sibling = label.find_next_sibling()
        if sibling is not None and value_class in (sibling.get("class") or []):
            return sibling.get_text(strip=True)
    return ""
