# backend/tests/routers/test_assets_api.py
"""
Integration tests for the /api/assets endpoints.

This module tests:
- Listing, filtering and fetching assets
- Creation with validation (symbol, amount, ynabAccountId)
- Partial updates
- Deletion
"""

from decimal import Decimal

import pytest

from tests.conftest import ACCOUNT_ID, OTHER_ACCOUNT_ID, create_asset

BASE = "/api/assets"


class TestListAssets:

    def test_empty(self, client):
        response = client.get(BASE)

        assert response.status_code == 200
        assert response.json() == []

    def test_list_returns_camel_case(self, client, db):
        create_asset(db, "AAPL", "10.5")

        [asset] = client.get(BASE).json()

        assert asset["symbol"] == "AAPL"
        assert asset["amount"] == 10.5
        assert asset["ynabAccountId"] == ACCOUNT_ID
        assert {"id", "createdAt", "updatedAt"} <= set(asset)

    def test_filter_by_ynab_account(self, client, db):
        create_asset(db, "AAPL")
        create_asset(db, "MSFT", ynab_account_id=OTHER_ACCOUNT_ID)

        response = client.get(BASE, params={"ynabAccountId": OTHER_ACCOUNT_ID})

        assert [a["symbol"] for a in response.json()] == ["MSFT"]


class TestGetAsset:

    def test_get_by_id(self, client, db):
        asset = create_asset(db)

        response = client.get(f"{BASE}/{asset.id}")

        assert response.status_code == 200
        assert response.json()["id"] == asset.id

    def test_missing_returns_404(self, client):
        response = client.get(f"{BASE}/missing")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "AssetNotFoundError"
        assert body["details"] == {"resource_type": "Asset", "resource_id": "missing"}


class TestCreateAsset:

    def test_create(self, client):
        response = client.post(BASE, json={
            "symbol": " vwce ",
            "amount": "3.25",
            "ynabAccountId": ACCOUNT_ID,
        })

        assert response.status_code == 201
        body = response.json()
        assert body["symbol"] == "VWCE"
        assert body["amount"] == 3.25
        assert len(client.get(BASE).json()) == 1

    @pytest.mark.parametrize("payload", [
        {"symbol": "AAPL", "amount": 0, "ynabAccountId": ACCOUNT_ID},
        {"symbol": "AAPL", "amount": -2, "ynabAccountId": ACCOUNT_ID},
        {"symbol": "   ", "amount": 1, "ynabAccountId": ACCOUNT_ID},
        {"symbol": "AAPL", "amount": 1, "ynabAccountId": "not-a-uuid"},
        {"symbol": "AAPL", "amount": 1},
    ])
    def test_invalid_payloads(self, client, payload):
        response = client.post(BASE, json=payload)

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"


class TestUpdateAsset:

    def test_patch_amount_only(self, client, db):
        asset = create_asset(db, "AAPL", "1")

        response = client.patch(f"{BASE}/{asset.id}", json={"amount": 4})

        assert response.status_code == 200
        body = response.json()
        assert body["amount"] == 4
        assert body["symbol"] == "AAPL"
        assert body["ynabAccountId"] == ACCOUNT_ID

    def test_patch_account(self, client, db):
        asset = create_asset(db)

        response = client.patch(f"{BASE}/{asset.id}", json={"ynabAccountId": OTHER_ACCOUNT_ID})

        assert response.json()["ynabAccountId"] == OTHER_ACCOUNT_ID

    def test_patch_rejects_zero_amount(self, client, db):
        asset = create_asset(db)

        response = client.patch(f"{BASE}/{asset.id}", json={"amount": 0})

        assert response.status_code == 422
        db.refresh(asset)
        assert asset.amount == Decimal("10")

    def test_patch_missing(self, client):
        response = client.patch(f"{BASE}/missing", json={"amount": 1})

        assert response.status_code == 404


class TestDeleteAsset:

    def test_delete(self, client, db):
        asset = create_asset(db)

        response = client.delete(f"{BASE}/{asset.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Asset deleted successfully"}
        assert client.get(BASE).json() == []

    def test_delete_missing(self, client):
        assert client.delete(f"{BASE}/missing").status_code == 404
