# backend/app/routers/assets.py
"""
Asset management endpoints.

An asset is a holding (symbol + amount) linked to one YNAB account. The
sync values every asset and pushes the per-account totals to YNAB.

Endpoints:
    GET    /api/assets                 - List assets (optionally by ynabAccountId)
    GET    /api/assets/{id}            - Get one asset
    POST   /api/assets                 - Create an asset
    PATCH  /api/assets/{id}            - Partial update
    DELETE /api/assets/{id}            - Delete an asset
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_asset_service
from app.middleware.rate_limit import limiter, RATE_LIMIT_WRITE
from app.models import Asset
from app.schemas.assets import AssetCreate, AssetUpdate, AssetResponse, MessageResponse
from app.services.asset_service import AssetService

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/assets",
    tags=["Assets"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "",
    response_model=list[AssetResponse],
    summary="List assets",
)
def list_assets(
        ynab_account_id: str | None = Query(
            default=None,
            alias="ynabAccountId",
            description="Only assets linked to this YNAB account",
        ),
        db: Session = Depends(get_db),
        service: AssetService = Depends(get_asset_service),
) -> list[Asset]:
    """
    List all assets, oldest first.

    Pass `ynabAccountId` to list only the assets of one YNAB account.
    """
    if ynab_account_id:
        return service.find_by_ynab_account_id(db, ynab_account_id)
    return service.find_all(db)


@router.get(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Get an asset",
    responses={404: {"description": "Asset not found"}},
)
def get_asset(
        asset_id: str,
        db: Session = Depends(get_db),
        service: AssetService = Depends(get_asset_service),
) -> Asset:
    # AssetNotFoundError propagates to the global 404 handler
    return service.find_one(db, asset_id)


@router.post(
    "",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an asset",
    response_description="The created asset",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_asset(
        request: Request,  # Required for rate limiting
        payload: AssetCreate,
        db: Session = Depends(get_db),
        service: AssetService = Depends(get_asset_service),
) -> Asset:
    """
    Track a new holding.

    - **symbol**: ticker, crypto symbol or ISIN (stored upper-case)
    - **amount**: units held, must be positive
    - **ynabAccountId**: the YNAB account whose balance this asset feeds
    """
    return service.create(
        db,
        symbol=payload.symbol,
        amount=payload.amount,
        ynab_account_id=payload.ynab_account_id,
    )


@router.patch(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Update an asset",
    responses={404: {"description": "Asset not found"}},
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_asset(
        request: Request,  # Required for rate limiting
        asset_id: str,
        payload: AssetUpdate,
        db: Session = Depends(get_db),
        service: AssetService = Depends(get_asset_service),
) -> Asset:
    """Change any of symbol, amount or ynabAccountId. Omitted fields are kept."""
    return service.update(
        db,
        asset_id,
        amount=payload.amount,
        ynab_account_id=payload.ynab_account_id,
        symbol=payload.symbol,
    )


@router.delete(
    "/{asset_id}",
    response_model=MessageResponse,
    summary="Delete an asset",
    responses={404: {"description": "Asset not found"}},
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_asset(
        request: Request,  # Required for rate limiting
        asset_id: str,
        db: Session = Depends(get_db),
        service: AssetService = Depends(get_asset_service),
) -> MessageResponse:
    service.remove(db, asset_id)
    return MessageResponse(message="Asset deleted successfully")
