"""Outbox relay: pending events are handed to the bus and marked."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.tasks import publish_outbox_events

pytestmark = pytest.mark.integration


def test_publishes_pending_events(affiliate, place_order):
    place_order(affiliate)
    pending = OutboxEvent.objects.filter(status=EventStatus.PENDING).count()
    assert pending >= 1

    result = publish_outbox_events()

    assert result == {"published": pending, "failed": 0}
    assert not OutboxEvent.objects.filter(status=EventStatus.PENDING).exists()
    assert all(
        event.processed_at is not None
        for event in OutboxEvent.objects.filter(status=EventStatus.PUBLISHED)
    )


def test_second_run_is_a_noop(affiliate, place_order):
    place_order(affiliate)
    publish_outbox_events()

    assert publish_outbox_events() == {"published": 0, "failed": 0}


def test_failing_handler_marks_event_failed(affiliate, place_order):
    place_order(affiliate)

    with patch(
        "modules.core.tasks.event_bus.publish", side_effect=RuntimeError("boom")
    ):
        result = publish_outbox_events()

    assert result["published"] == 0
    assert result["failed"] >= 1
    failed = OutboxEvent.objects.filter(status=EventStatus.FAILED).first()
    assert failed is not None
    assert "boom" in failed.error_message
