# backend/tests/test_correlation_id.py
"""
Tests for correlation ID middleware and context management.
"""

import pytest

from app.middleware.correlation import is_valid_correlation_id
from app.utils.context import get_correlation_id, set_correlation_id, clear_correlation_id


class TestCorrelationIdContext:
    """Tests for correlation ID context functions."""

    def test_get_returns_none_when_not_set(self):
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_get_correlation_id(self):
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"
        clear_correlation_id()

    def test_clear_correlation_id(self):
        set_correlation_id("test-correlation-456")
        clear_correlation_id()
        assert get_correlation_id() is None


class TestCorrelationIdValidation:

    @pytest.mark.parametrize("value", ["abc-123", "req.1:2_3", "a" * 128])
    def test_valid(self, value):
        assert is_valid_correlation_id(value)

    @pytest.mark.parametrize("value", ["", "a" * 129, "has space", "new\nline", "<script>"])
    def test_invalid(self, value):
        assert not is_valid_correlation_id(value)


class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    def test_generates_id_when_missing(self, client):
        response = client.get("/health/live")

        correlation_id = response.headers["X-Correlation-ID"]
        assert len(correlation_id) == 36

    def test_echoes_incoming_id(self, client):
        response = client.get("/health/live", headers={"X-Correlation-ID": "my-trace-id"})

        assert response.headers["X-Correlation-ID"] == "my-trace-id"

    def test_falls_back_to_request_id(self, client):
        response = client.get("/health/live", headers={"X-Request-ID": "req-7"})

        assert response.headers["X-Correlation-ID"] == "req-7"

    def test_replaces_unsafe_id(self, client):
        response = client.get("/health/live", headers={"X-Correlation-ID": "bad id!"})

        assert response.headers["X-Correlation-ID"] != "bad id!"
        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_unique_per_request(self, client):
        first = client.get("/health/live").headers["X-Correlation-ID"]
        second = client.get("/health/live").headers["X-Correlation-ID"]

        assert first != second

    def test_context_cleared_after_request(self, client):
        client.get("/health/live", headers={"X-Correlation-ID": "leak-check"})

        assert get_correlation_id() is None
