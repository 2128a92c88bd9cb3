"""Unit tests for the in-memory command and event buses."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.orders.events import OrderCancelled, OrderCreated
from shared.domain.commands import Command
from shared.infrastructure.bus import (
    InMemoryCommandBus,
    InMemoryEventBus,
    ServiceCommandHandler,
)

pytestmark = pytest.mark.unit


class PingCommand(Command):
    value: int


class UnregisteredCommand(Command):
    pass


class TestInMemoryCommandBus:
    def test_dispatch_routes_to_registered_handler(self):
        bus = InMemoryCommandBus()
        handler = MagicMock()
        handler.handle.return_value = "pong"
        bus.register(PingCommand, handler)

        command = PingCommand(value=1)
        result = bus.dispatch(command)

        assert result == "pong"
        handler.handle.assert_called_once_with(command)

    def test_dispatch_without_handler_raises_lookup_error(self):
        bus = InMemoryCommandBus()
        with pytest.raises(LookupError, match="UnregisteredCommand"):
            bus.dispatch(UnregisteredCommand())

    def test_register_replaces_previous_handler(self):
        bus = InMemoryCommandBus()
        first, second = MagicMock(), MagicMock()
        bus.register(PingCommand, first)
        bus.register(PingCommand, second)

        bus.dispatch(PingCommand(value=2))

        first.handle.assert_not_called()
        second.handle.assert_called_once()

    def test_commands_are_frozen(self):
        command = PingCommand(value=1)
        with pytest.raises(Exception):
            command.value = 2


class TestServiceCommandHandler:
    def test_builds_a_fresh_service_per_command(self):
        factory = MagicMock()
        handler = ServiceCommandHandler(factory, "do_work")

        handler.handle(PingCommand(value=1))
        handler.handle(PingCommand(value=2))

        assert factory.call_count == 2
        factory.return_value.do_work.assert_called_with(PingCommand(value=2))

    def test_returns_service_result(self):
        service = MagicMock()
        service.do_work.return_value = 42
        handler = ServiceCommandHandler(lambda: service, "do_work")

        assert handler.handle(PingCommand(value=1)) == 42

    def test_repr_names_the_method(self):
        handler = ServiceCommandHandler(MagicMock(), "do_work")
        assert "do_work" in repr(handler)


class TestInMemoryEventBus:
    def test_publish_routes_by_event_type(self):
        bus = InMemoryEventBus()
        created_handler = MagicMock()
        cancelled_handler = MagicMock()
        bus.subscribe(OrderCreated, created_handler)
        bus.subscribe(OrderCancelled, cancelled_handler)

        event = OrderCreated(aggregate_id=uuid4())
        bus.publish(event)

        created_handler.handle.assert_called_once_with(event)
        cancelled_handler.handle.assert_not_called()

    def test_subscribing_twice_delivers_once(self):
        bus = InMemoryEventBus()
        handler = MagicMock()
        bus.subscribe(OrderCreated, handler)
        bus.subscribe(OrderCreated, handler)

        bus.publish(OrderCreated(aggregate_id=uuid4()))

        handler.handle.assert_called_once()
