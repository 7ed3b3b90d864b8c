# backend/app/services/market_data/__init__.py
"""
Price resolution package.

- base.py: PriceProvider interface, PriceQuote and PriceLookup
- service.py: MarketDataService, dispatching over providers in order
- currency.py: CurrencyConverter (exchangerate-api.com, TTL cache)
- raiffeisen_cz.py: HTML scraper for Raiffeisen CZ product pages
- yahoo.py: yfinance-backed provider
- finnhub.py, alpha_vantage.py, polygon.py, coinmarketcap.py: keyed JSON APIs
- static.py: fixed prices for local development

Architecture:
    PriceProvider (ABC)
    ├── RaiffeisenCZProvider
    ├── YahooFinanceProvider
    ├── StaticPriceProvider
    └── KeyedApiProvider
        ├── FinnhubProvider
        ├── AlphaVantageProvider
        ├── PolygonProvider
        └── CoinMarketCapProvider

    MarketDataService
    └── asks each available provider for the still-unresolved symbols
"""

from app.services.market_data.base import (
    PriceProvider,
    PriceQuote,
    PriceLookup,
    is_valid_price,
)
from app.services.market_data.currency import CurrencyConverter
from app.services.market_data.service import MarketDataService, PriceResolution
from app.services.market_data.alpha_vantage import AlphaVantageProvider
from app.services.market_data.coinmarketcap import CoinMarketCapProvider
from app.services.market_data.finnhub import FinnhubProvider
from app.services.market_data.polygon import PolygonProvider
from app.services.market_data.raiffeisen_cz import RaiffeisenCZProvider
from app.services.market_data.static import StaticPriceProvider
from app.services.market_data.yahoo import YahooFinanceProvider

__all__ = [
    "PriceProvider",
    "PriceQuote",
    "PriceLookup",
    "is_valid_price",
    "CurrencyConverter",
    "MarketDataService",
    "PriceResolution",
    "AlphaVantageProvider",
    "CoinMarketCapProvider",
    "FinnhubProvider",
    "PolygonProvider",
    "RaiffeisenCZProvider",
    "StaticPriceProvider",
    "YahooFinanceProvider",
]
