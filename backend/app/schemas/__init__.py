# backend/app/schemas/__init__.py
"""
Request and response schemas for the API.

All models use camelCase JSON keys (see app/schemas/base.py).
"""

from app.schemas.assets import AssetCreate, AssetUpdate, AssetResponse, MessageResponse
from app.schemas.base import CamelModel, JsonDecimal, UUID_PATTERN
from app.schemas.errors import ErrorDetail, ValidationErrorDetail
from app.schemas.market_data import (
    PriceRequest,
    PriceQuoteResponse,
    BulkPriceResponse,
    ConvertRequest,
    ConvertResponse,
    ProvidersResponse,
)
from app.schemas.user_settings import SettingsCreate, SettingsUpdate, SettingsResponse
from app.schemas.ynab import (
    TokenRequest,
    AccountsRequest,
    BudgetResponse,
    AccountResponse,
    AccountSyncSummary,
    SyncResponse,
)

__all__ = [
    "CamelModel",
    "JsonDecimal",
    "UUID_PATTERN",
    "ErrorDetail",
    "ValidationErrorDetail",
    "AssetCreate",
    "AssetUpdate",
    "AssetResponse",
    "MessageResponse",
    "SettingsCreate",
    "SettingsUpdate",
    "SettingsResponse",
    "PriceRequest",
    "PriceQuoteResponse",
    "BulkPriceResponse",
    "ConvertRequest",
    "ConvertResponse",
    "ProvidersResponse",
    "TokenRequest",
    "AccountsRequest",
    "BudgetResponse",
    "AccountResponse",
    "AccountSyncSummary",
    "SyncResponse",
]
