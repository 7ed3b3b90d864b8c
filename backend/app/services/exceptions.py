# backend/app/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The global handlers in app/main.py map them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── NotFoundError
    │   └── AssetNotFoundError
    ├── ConfigurationError
    │   ├── SettingsNotConfiguredError
    │   └── BudgetNotFoundError
    ├── MarketDataError
    │   ├── ProviderUnavailableError
    │   ├── TickerNotFoundError
    │   ├── RateLimitError
    │   └── CurrencyConversionError
    └── YnabError
        ├── YnabApiError
        ├── YnabAuthenticationError
        └── YnabNotFoundError

Price providers never raise these for per-symbol failures; they omit the
symbol instead. The exceptions below surface from the YNAB client, the
dispatcher's single-symbol lookup, and the CRUD services.
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when a service receives input it cannot act on.

    Request payload validation is handled by Pydantic before this point.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Asset")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class AssetNotFoundError(NotFoundError):
    """Raised when an asset id does not exist."""

    def __init__(self, asset_id: str) -> None:
        self.asset_id = asset_id
        super().__init__(
            f"Asset with ID {asset_id} not found",
            resource_type="Asset",
            resource_id=asset_id,
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(ServiceError):
    """The application is missing configuration needed to proceed."""


class SettingsNotConfiguredError(ConfigurationError):
    """Raised when a sync is requested before user settings were saved."""

    def __init__(self) -> None:
        super().__init__(
            "No user settings found. Please configure the application first."
        )


class BudgetNotFoundError(ConfigurationError):
    """
    Raised when no YNAB budget can be selected.

    Attributes:
        budget_id: The requested budget, or None when the token has no budgets at all
    """

    def __init__(self, budget_id: str | None = None) -> None:
        self.budget_id = budget_id
        if budget_id:
            message = f"YNAB budget {budget_id} not found"
        else:
            message = "No budgets found in YNAB account"
        super().__init__(message)


# =============================================================================
# MARKET DATA ERRORS
# =============================================================================


class MarketDataError(ServiceError):
    """
    Base exception for market data and outbound API failures.

    Attributes:
        provider: Name of the upstream service (e.g., "Finnhub", "ynab")
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(MarketDataError):
    """
    Raised when an upstream service cannot be reached.

    Network errors, timeouts and 5xx responses. Retryable.
    """

    def __init__(self, provider: str, reason: str | None = None) -> None:
        self.reason = reason
        message = f"Provider '{provider}' is unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message, provider=provider)


class TickerNotFoundError(MarketDataError):
    """
    Raised when no provider returned a valid price for a symbol.

    Attributes:
        ticker: The symbol that was not resolved
    """

    def __init__(self, ticker: str, provider: str | None = None) -> None:
        self.ticker = ticker
        super().__init__(f"No price found for symbol '{ticker}'", provider=provider)


class RateLimitError(MarketDataError):
    """
    Raised when an upstream API rejects a call for rate limiting. Retryable.

    Attributes:
        retry_after: Seconds to wait before retrying (if known)
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        self.retry_after = retry_after
        message = f"Rate limit exceeded for provider '{provider}'"
        if retry_after:
            message += f". Retry after {retry_after} seconds"
        super().__init__(message, provider=provider)


class CurrencyConversionError(MarketDataError):
    """
    Raised when an amount cannot be converted between two currencies.

    Attributes:
        from_currency: Source currency code
        to_currency: Target currency code
    """

    def __init__(self, from_currency: str, to_currency: str, reason: str | None = None) -> None:
        self.from_currency = from_currency
        self.to_currency = to_currency
        message = f"Cannot convert {from_currency} to {to_currency}"
        if reason:
            message += f": {reason}"
        super().__init__(message, provider="exchangerate-api")


# =============================================================================
# YNAB ERRORS
# =============================================================================


class YnabError(ServiceError):
    """Base exception for YNAB API errors that are not transient."""


class YnabApiError(YnabError):
    """
    YNAB answered with an unexpected error status.

    Attributes:
        status_code: HTTP status returned by YNAB
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class YnabAuthenticationError(YnabApiError):
    """The YNAB token was rejected (HTTP 401)."""

    def __init__(self) -> None:
        super().__init__("Invalid YNAB API token", status_code=401)


class YnabNotFoundError(YnabApiError):
    """A YNAB budget or account does not exist (HTTP 404)."""

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"YNAB resource not found: {resource}", status_code=404)


__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "AssetNotFoundError",
    "ConfigurationError",
    "SettingsNotConfiguredError",
    "BudgetNotFoundError",
    "MarketDataError",
    "ProviderUnavailableError",
    "TickerNotFoundError",
    "RateLimitError",
    "CurrencyConversionError",
    "YnabError",
    "YnabApiError",
    "YnabAuthenticationError",
    "YnabNotFoundError",
]
