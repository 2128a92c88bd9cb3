"""Domain bus interfaces for in-process event and command handling."""

from __future__ import annotations

from typing import Any, Generic, Protocol, Type, TypeVar

from shared.domain.commands import Command
from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)
C = TypeVar("C", bound=Command, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Handler interface for domain events."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Event bus interface."""

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...


class ICommandHandler(Protocol, Generic[C]):
    """Handler interface for commands (exactly one handler per command type)."""

    def handle(self, command: C) -> Any: ...


class ICommandBus(Protocol):
    """Command bus interface."""

    def dispatch(self, command: Command) -> Any: ...

    def register(
        self, command_class: Type[C], handler: ICommandHandler[C]
    ) -> None: ...
