"""Unit tests for domain event serialization round trips through the outbox."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.core.outbox import serialize_event_payload
from modules.inventory.events import InventoryChangeCompleted
from modules.orders.events import OrderFinished
from shared.domain.events import DomainEvent, DomainEventMixin

pytestmark = pytest.mark.unit


def test_event_name_is_class_name():
    event = OrderFinished(aggregate_id=uuid4(), affiliate_id="5512340001", quantity=3)
    assert event.event_name == "OrderFinished"


def test_payload_is_json_safe():
    aggregate_id = uuid4()
    event = OrderFinished(aggregate_id=aggregate_id, affiliate_id="5512340001")

    payload = serialize_event_payload(event)

    assert payload["aggregate_id"] == str(aggregate_id)
    assert payload["event_name"] == "OrderFinished"
    assert isinstance(payload["occurred_on"], str)


def test_from_payload_rebuilds_the_event():
    event = InventoryChangeCompleted(
        aggregate_id=uuid4(),
        affiliate_id="5512340001",
        amount=50,
        new_inventory=80,
        cleared_orders=1,
    )

    rebuilt = DomainEvent.from_payload(serialize_event_payload(event))

    assert isinstance(rebuilt, InventoryChangeCompleted)
    assert rebuilt.aggregate_id == event.aggregate_id
    assert rebuilt.event_id == event.event_id
    assert rebuilt.occurred_on == event.occurred_on
    assert rebuilt.amount == 50
    assert rebuilt.cleared_orders == 1


def test_from_payload_rejects_unknown_event():
    with pytest.raises(LookupError):
        DomainEvent.from_payload({"event_name": "Nope", "aggregate_id": str(uuid4())})


def test_mixin_collects_and_clears_events():
    class Aggregate(DomainEventMixin):
        pass

    aggregate = Aggregate()
    aggregate.add_domain_event(OrderFinished(aggregate_id=uuid4()))

    assert len(aggregate.domain_events) == 1
    aggregate.clear_domain_events()
    assert aggregate.domain_events == []
