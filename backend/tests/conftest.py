# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Environment setup (test mode: in-memory SQLite, no rate limits, no scheduler)
- Database session fixtures (in-memory SQLite)
- A configurable fake price provider
- An httpx MockTransport router for outbound HTTP
- Sample data factories
- An API client with the database dependency overridden
"""

import os

# Must be set before anything imports app.config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("APP_NAME", "Test App")

from decimal import Decimal
from typing import Callable, Iterator

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Asset, SyncSchedule, UserSettings
from app.services.http_client import build_http_client
from app.services.market_data.base import PriceLookup, PriceProvider

ACCOUNT_ID = "12345678-1234-1234-1234-123456789012"
OTHER_ACCOUNT_ID = "87654321-4321-4321-4321-210987654321"
BUDGET_ID = "budget-1"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def session_factory(db_engine) -> Callable[[], Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Iterator[Session]:
    """Create a database session for testing."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# FAKE PRICE PROVIDER
# =============================================================================

class FakePriceProvider(PriceProvider):
    """
    In-memory PriceProvider for testing.

    Prices are looked up case-insensitively; symbols listed in `invalid`
    come back as invalid, everything else is omitted.
    """

    def __init__(
            self,
            name: str = "fake",
            prices: dict[str, Decimal] | None = None,
            invalid: dict[str, str] | None = None,
            available: bool = True,
            error: Exception | None = None,
    ):
        self._name = name
        self._prices = {k.upper(): Decimal(str(v)) for k, v in (prices or {}).items()}
        self._invalid = {k.upper(): v for k, v in (invalid or {}).items()}
        self._available = available
        self._error = error
        self.calls: list[tuple[list[str], str]] = []

    @property
    def name(self) -> str:
        return self._name

    def is_available(self) -> bool:
        return self._available

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        self.calls.append((list(symbols), target_currency))
        if self._error is not None:
            raise self._error

        lookup = PriceLookup()
        for symbol in symbols:
            if symbol.upper() in self._prices:
                self._accept(lookup, symbol, self._prices[symbol.upper()], target_currency)
            elif symbol.upper() in self._invalid:
                lookup.mark_invalid(symbol, self._invalid[symbol.upper()])
        return lookup


@pytest.fixture
def fake_provider() -> FakePriceProvider:
    return FakePriceProvider(prices={"AAPL": Decimal("150"), "MSFT": Decimal("300")})


# =============================================================================
# OUTBOUND HTTP
# =============================================================================

class MockHttp:
    """
    Route table for httpx.MockTransport.

    Routes are matched on (method, path); unmatched requests get a 404.
    Every request is recorded in `requests`.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response) -> None:
        """`response` is an httpx.Response, or a callable taking the request."""
        handler = response if callable(response) else (lambda request: response)
        self.routes[(method.upper(), path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)

    def client(self) -> httpx.Client:
        return build_http_client(timeout=5.0, transport=httpx.MockTransport(self.handle))

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def mock_http() -> MockHttp:
    return MockHttp()


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def create_asset(
        db: Session,
        symbol: str = "AAPL",
        amount: Decimal | str = "10",
        ynab_account_id: str = ACCOUNT_ID,
) -> Asset:
    """Create and persist a test asset."""
    asset = Asset(symbol=symbol, amount=Decimal(str(amount)), ynab_account_id=ynab_account_id)
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def create_settings(
        db: Session,
        token: str = "ynab-token",
        sync_schedule: SyncSchedule = SyncSchedule.DAILY,
        target_budget_id: str | None = None,
) -> UserSettings:
    """Create and persist test user settings."""
    settings = UserSettings(
        ynab_api_token=token,
        sync_schedule=sync_schedule,
        target_budget_id=target_budget_id,
    )
    db.add(settings)
    db.commit()
    db.refresh(settings)
    return settings


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture(scope="function")
def client(db: Session):
    """
    TestClient with the database dependency overridden.

    Tests add further overrides through `app.dependency_overrides`;
    all of them are cleared afterwards.
    """
    from fastapi.testclient import TestClient

    from app.database import get_db
    from app.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
