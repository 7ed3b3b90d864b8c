# backend/tests/routers/test_settings_api.py
"""
Integration tests for the /api/settings endpoints.
"""

import pytest

from app.models import SyncSchedule
from tests.conftest import create_settings

BASE = "/api/settings"


class TestGetSettings:

    def test_not_configured_returns_null(self, client):
        response = client.get(BASE)

        assert response.status_code == 200
        assert response.json() is None

    def test_returns_stored_settings(self, client, db):
        create_settings(db, token="tok", sync_schedule=SyncSchedule.WEEKLY, target_budget_id="b-1")

        body = client.get(BASE).json()

        assert body["ynabApiToken"] == "tok"
        assert body["syncSchedule"] == "weekly"
        assert body["targetBudgetId"] == "b-1"


class TestCreateSettings:

    def test_create_with_defaults(self, client):
        response = client.post(BASE, json={"ynabApiToken": "  tok  "})

        assert response.status_code == 201
        body = response.json()
        assert body["ynabApiToken"] == "tok"
        assert body["syncSchedule"] == "daily"
        assert body["targetBudgetId"] is None

    def test_create_replaces_previous(self, client, db):
        create_settings(db, token="old")

        client.post(BASE, json={"ynabApiToken": "new", "syncSchedule": "monthly_first"})

        body = client.get(BASE).json()
        assert body["ynabApiToken"] == "new"
        assert body["syncSchedule"] == "monthly_first"

    @pytest.mark.parametrize("payload", [
        {},
        {"ynabApiToken": ""},
        {"ynabApiToken": "   "},
        {"ynabApiToken": "tok", "syncSchedule": "hourly"},
    ])
    def test_invalid_payloads(self, client, payload):
        assert client.post(BASE, json=payload).status_code == 422


class TestUpdateSettings:

    def test_patch_schedule_keeps_token(self, client, db):
        create_settings(db, token="tok")

        response = client.patch(BASE, json={"syncSchedule": "every_two_weeks"})

        assert response.status_code == 200
        body = response.json()
        assert body["syncSchedule"] == "every_two_weeks"
        assert body["ynabApiToken"] == "tok"

    def test_explicit_null_clears_target_budget(self, client, db):
        create_settings(db, target_budget_id="b-1")

        body = client.patch(BASE, json={"targetBudgetId": None}).json()

        assert body["targetBudgetId"] is None

    def test_omitted_target_budget_is_kept(self, client, db):
        create_settings(db, target_budget_id="b-1")

        body = client.patch(BASE, json={"ynabApiToken": "new"}).json()

        assert body["targetBudgetId"] == "b-1"

    def test_patch_creates_settings_with_token(self, client):
        response = client.patch(BASE, json={"ynabApiToken": "tok"})

        assert response.status_code == 200
        assert response.json()["syncSchedule"] == "daily"

    def test_patch_without_settings_or_token(self, client):
        response = client.patch(BASE, json={"syncSchedule": "weekly"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "ValidationError"
        assert body["details"] == {"field": "ynabApiToken"}
