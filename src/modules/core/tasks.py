"""Outbox relay task."""

from __future__ import annotations

import structlog
from celery import shared_task

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Publish pending outbox events to the in-process event bus.

    Events are handed over in creation order.  A failing event is marked
    ``FAILED`` with its error and does not block the rest of the batch.
    """
    pending = list(
        OutboxEvent.objects.filter(status=EventStatus.PENDING).order_by(
            "created_at"
        )[:batch_size]
    )
    published = 0
    failed = 0
    for record in pending:
        try:
            event = DomainEvent.from_payload(record.payload)
            event_bus.publish(event)
        except Exception as exc:
            record.mark_as_failed(str(exc))
            failed += 1
            logger.error(
                "outbox.publish_failed",
                outbox_id=str(record.id),
                event_type=record.event_type,
                error=str(exc),
            )
            continue
        record.mark_as_published()
        published += 1

    logger.info("outbox.batch_published", published=published, failed=failed)
    return {"published": published, "failed": failed}
