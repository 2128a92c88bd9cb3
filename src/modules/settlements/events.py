"""Domain events for the settlement engine."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class CashOutPerformed(DomainEvent):
    affiliate_id: str = ""
    order_count: int = 0
    balance: str = ""
    status: str = ""


@dataclass(frozen=True)
class CashOutConfirmed(DomainEvent):
    """Raised when the affiliate confirms receipt of the admin's payment."""

    affiliate_id: str = ""
