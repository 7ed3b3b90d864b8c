# backend/app/services/asset_service.py
"""
Asset Service: CRUD for tracked holdings.

Symbols are stored upper-cased; amounts must stay positive. The sync reads
assets through `find_all` and groups them by YNAB account itself.
"""

import logging
from collections import defaultdict
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Asset
from app.services.exceptions import AssetNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class AssetService:
    """Create, read, update and delete assets."""

    def create(
            self,
            db: Session,
            symbol: str,
            amount: Decimal,
            ynab_account_id: str,
    ) -> Asset:
        _require_positive(amount)

        asset = Asset(
            symbol=symbol.strip().upper(),
            amount=amount,
            ynab_account_id=ynab_account_id,
        )
        db.add(asset)
        db.commit()
        db.refresh(asset)

        logger.info(f"Created asset {asset.id}: {asset.amount} {asset.symbol} -> {asset.ynab_account_id}")
        return asset

    def find_all(self, db: Session) -> list[Asset]:
        return list(db.scalars(select(Asset).order_by(Asset.created_at, Asset.id)))

    def find_by_ynab_account_id(self, db: Session, ynab_account_id: str) -> list[Asset]:
        return list(db.scalars(
            select(Asset)
            .where(Asset.ynab_account_id == ynab_account_id)
            .order_by(Asset.created_at, Asset.id)
        ))

    def find_one(self, db: Session, asset_id: str) -> Asset:
        """
        Raises:
            AssetNotFoundError: No asset with this id
        """
        asset = db.get(Asset, asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        return asset

    def update(
            self,
            db: Session,
            asset_id: str,
            amount: Decimal | None = None,
            ynab_account_id: str | None = None,
            symbol: str | None = None,
    ) -> Asset:
        """
        Apply a partial update; fields left as None are unchanged.

        Raises:
            AssetNotFoundError: No asset with this id
            ValidationError: amount is not positive
        """
        asset = self.find_one(db, asset_id)

        if amount is not None:
            _require_positive(amount)
            asset.amount = amount
        if ynab_account_id is not None:
            asset.ynab_account_id = ynab_account_id
        if symbol is not None:
            asset.symbol = symbol.strip().upper()

        db.commit()
        db.refresh(asset)
        logger.info(f"Updated asset {asset_id}")
        return asset

    def remove(self, db: Session, asset_id: str) -> None:
        """
        Raises:
            AssetNotFoundError: No asset with this id
        """
        asset = self.find_one(db, asset_id)
        symbol = asset.symbol
        db.delete(asset)
        db.commit()
        logger.info(f"Deleted asset {asset_id} ({symbol})")

    def group_by_account(self, assets: list[Asset]) -> dict[str, list[Asset]]:
        """Assets keyed by YNAB account id, preserving input order."""
        groups: dict[str, list[Asset]] = defaultdict(list)
        for asset in assets:
            groups[asset.ynab_account_id].append(asset)
        return dict(groups)


def _require_positive(amount: Decimal) -> None:
    if amount is None or amount <= 0:
        raise ValidationError("amount must be a positive number", field="amount")
