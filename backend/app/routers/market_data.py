# backend/app/routers/market_data.py
"""
Market data endpoints.

Prices are resolved live on every call by asking the active providers in
order; nothing is cached except exchange rates.

Endpoints:
    POST /api/market-data/price      - Prices for one or more symbols
    POST /api/market-data/convert    - Convert an amount between currencies
    GET  /api/market-data/providers  - Active providers, in lookup order
"""

import logging

from fastapi import APIRouter, Depends, Request

from app.dependencies import get_market_data_service
from app.middleware.rate_limit import limiter, RATE_LIMIT_MARKET_DATA
from app.schemas.market_data import (
    PriceRequest,
    PriceQuoteResponse,
    BulkPriceResponse,
    ConvertRequest,
    ConvertResponse,
    ProvidersResponse,
)
from app.services.market_data import MarketDataService

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/market-data",
    tags=["Market Data"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "/price",
    response_model=BulkPriceResponse,
    summary="Get current prices",
    response_description="Resolved prices plus the symbols nobody could price",
)
@limiter.limit(RATE_LIMIT_MARKET_DATA)
def get_prices(
        request: Request,  # Required for rate limiting
        payload: PriceRequest,
        service: MarketDataService = Depends(get_market_data_service),
) -> BulkPriceResponse:
    """
    Resolve prices in `targetCurrency` (default USD).

    Send either `symbol` or `symbols`. Unknown symbols do not fail the
    request; they are listed in `notFound`, and symbols for which only
    zero or malformed prices came back are listed in `invalid`.
    """
    resolution = service.get_asset_prices(payload.requested_symbols(), payload.target_currency)

    return BulkPriceResponse(
        results=[
            PriceQuoteResponse(symbol=quote.symbol, price=quote.price, currency=quote.currency)
            for quote in resolution.quotes.values()
        ],
        not_found=resolution.not_found,
        invalid=resolution.invalid,
        timestamp=resolution.timestamp,
    )


@router.post(
    "/convert",
    response_model=ConvertResponse,
    summary="Convert currency",
    responses={400: {"description": "No exchange rate available"}},
)
@limiter.limit(RATE_LIMIT_MARKET_DATA)
def convert_currency(
        request: Request,  # Required for rate limiting
        payload: ConvertRequest,
        service: MarketDataService = Depends(get_market_data_service),
) -> ConvertResponse:
    # CurrencyConversionError propagates to the global handler
    converted = service.convert_currency(payload.amount, payload.from_currency, payload.to_currency)

    return ConvertResponse(
        converted_amount=converted,
        from_currency=payload.from_currency,
        to_currency=payload.to_currency,
    )


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List active price providers",
)
def list_providers(
        service: MarketDataService = Depends(get_market_data_service),
) -> ProvidersResponse:
    return ProvidersResponse(providers=service.get_available_providers())
