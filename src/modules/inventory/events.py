"""Domain events for the inventory change workflow."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class InventoryChangeRequested(DomainEvent):
    affiliate_id: str = ""
    amount: int = 0
    requested_by_admin: bool = False


@dataclass(frozen=True)
class InventoryChangeResolved(DomainEvent):
    affiliate_id: str = ""
    status: str = ""


@dataclass(frozen=True)
class InventoryChangeCompleted(DomainEvent):
    """Raised once the amount has been applied to the affiliate's stock."""

    affiliate_id: str = ""
    amount: int = 0
    new_inventory: int = 0
    cleared_orders: int = 0
