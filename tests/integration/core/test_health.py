"""Health endpoint: dependencies, outbox backlog and request correlation."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from modules.core.models import EventStatus, OutboxEvent

pytestmark = pytest.mark.integration


def test_reports_database_and_cache(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    for name in ("database", "cache"):
        assert data["services"][name]["status"] == "up"
        assert "response_time_ms" in data["services"][name]


def test_reports_outbox_backlog_without_failing(client, affiliate, place_order):
    place_order(affiliate)
    pending = OutboxEvent.objects.filter(status=EventStatus.PENDING).count()
    OutboxEvent.objects.filter(status=EventStatus.PENDING).update(
        status=EventStatus.FAILED, error_message="relay down"
    )

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["services"]["outbox"] == {"pending": 0, "failed": pending}


def test_cache_failure_is_unhealthy(client):
    broken = MagicMock()
    broken.get.return_value = None

    with patch("modules.core.views.cache", broken):
        response = client.get("/health")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["services"]["cache"] == {"status": "down"}


def test_echoes_caller_request_id(client):
    response = client.get("/health", HTTP_X_REQUEST_ID="shift-close-42")

    assert response["X-Request-ID"] == "shift-close-42"


def test_generates_request_id_when_missing(client):
    response = client.get("/health")

    assert len(response["X-Request-ID"]) == 32
