# backend/app/routers/ynab.py
"""
YNAB endpoints.

Budget and account browsing take the token in the body so the frontend can
list accounts before settings are saved (to link assets to them). The sync
endpoint uses the stored settings.

Endpoints:
    POST /api/ynab/budgets   - Budgets visible to a token
    POST /api/ynab/accounts  - Open accounts of a budget
    POST /api/ynab/sync      - Run a portfolio sync now
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_sync_service, get_ynab_service
from app.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT, RATE_LIMIT_SYNC
from app.schemas.ynab import (
    TokenRequest,
    AccountsRequest,
    BudgetResponse,
    AccountResponse,
    AccountSyncSummary,
    SyncResponse,
)
from app.services.exceptions import SettingsNotConfiguredError
from app.services.sync_service import PortfolioSyncService, SyncResult
from app.services.ynab import YnabAccount, YnabBudget, YnabService

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/ynab",
    tags=["YNAB"],
)


# =============================================================================
# HELPERS
# =============================================================================

def _sync_response(result: SyncResult) -> SyncResponse:
    return SyncResponse(
        message="Sync completed successfully",
        started_at=result.started_at,
        completed_at=result.completed_at,
        accounts_updated=result.accounts_updated,
        assets_skipped=result.assets_skipped,
        unresolved_symbols=result.unresolved_symbols,
        accounts=[
            AccountSyncSummary(
                account_id=a.account_id,
                account_name=a.account_name,
                currency=a.currency,
                total_value=a.total_value,
                adjustment=a.adjustment,
                status=a.status.value,
                priced_symbols=a.priced_symbols,
                skipped_symbols=a.skipped_symbols,
            )
            for a in result.accounts
        ],
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "/budgets",
    response_model=list[BudgetResponse],
    summary="List YNAB budgets",
    responses={400: {"description": "Invalid YNAB token"}},
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_budgets(
        request: Request,  # Required for rate limiting
        payload: TokenRequest,
        ynab: YnabService = Depends(get_ynab_service),
) -> list[YnabBudget]:
    return ynab.get_budgets(payload.token)


@router.post(
    "/accounts",
    response_model=list[AccountResponse],
    summary="List YNAB accounts",
    responses={
        400: {"description": "Invalid YNAB token or no budgets"},
        404: {"description": "Budget not found"},
    },
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_accounts(
        request: Request,  # Required for rate limiting
        payload: AccountsRequest,
        ynab: YnabService = Depends(get_ynab_service),
) -> list[YnabAccount]:
    """
    Open accounts of `budgetId`, or of the first budget when omitted.
    Balances are in major units of the budget currency.
    """
    return ynab.get_accounts(payload.token, payload.budget_id)


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Sync portfolio to YNAB",
    response_description="Per-account outcome of the run",
    responses={
        400: {"description": "Settings not configured"},
        500: {"description": "Sync failed"},
    },
)
@limiter.limit(RATE_LIMIT_SYNC)
def trigger_sync(
        request: Request,  # Required for rate limiting
        db: Session = Depends(get_db),
        service: PortfolioSyncService = Depends(get_sync_service),
) -> SyncResponse:
    """
    Value every asset and reconcile each linked YNAB account to its total.

    Assets without a valid price are left out of their account's total and
    listed in `unresolvedSymbols`.
    """
    try:
        result = service.trigger_manual_sync(db)
    except SettingsNotConfiguredError:
        raise
    except Exception as e:
        logger.error(f"Manual sync failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Sync failed: {str(e)}"
        )

    return _sync_response(result)
