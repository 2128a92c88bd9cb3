"""In-memory event and command bus implementations."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Type

import structlog

from shared.domain.bus import ICommandBus, ICommandHandler, IEventBus, IEventHandler
from shared.domain.commands import Command
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus."""

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            handler.handle(event)


class InMemoryCommandBus(ICommandBus):
    """In-process command bus routing each command type to one handler."""

    def __init__(self) -> None:
        self._handlers: Dict[Type[Command], ICommandHandler] = {}

    def register(self, command_class: Type[Command], handler: ICommandHandler) -> None:
        self._handlers[command_class] = handler

    def dispatch(self, command: Command) -> Any:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise LookupError(f"No handler registered for {command.command_name}.")
        logger.info("command.dispatched", command=command.command_name)
        return handler.handle(command)


class ServiceCommandHandler:
    """Adapts one application-service method to ``ICommandHandler``.

    The service is built per command through *service_factory* so every
    dispatch sees freshly constructed repositories.
    """

    def __init__(self, service_factory: Callable[[], Any], method_name: str) -> None:
        self._service_factory = service_factory
        self._method_name = method_name

    def handle(self, command: Command) -> Any:
        service = self._service_factory()
        return getattr(service, self._method_name)(command)

    def __repr__(self) -> str:
        return f"ServiceCommandHandler({self._method_name})"


# Global bus instances (singletons)

event_bus = InMemoryEventBus()
command_bus = InMemoryCommandBus()
