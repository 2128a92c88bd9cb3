"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    affiliate_id: str = ""
    quantity: int = 0
    payment_method: str = ""
    coupon_used: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every status change, including reopening."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderFinished(DomainEvent):
    """Raised when an order is fulfilled and stock has been debited."""

    affiliate_id: str = ""
    quantity: int = 0
    referral_code_used: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    affiliate_id: str = ""


@dataclass(frozen=True)
class OrderReopened(DomainEvent):
    """Raised when a cancelled order is put back to active."""

    affiliate_id: str = ""
