"""Settlement command DTOs and output shapes."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from shared.domain.commands import Command


class PerformCashOutDTO(Command):
    """Settle every finished, unsettled order of one affiliate.

    ``proof_of_payment`` (a reference to the transfer receipt) is mandatory
    when the balance is negative; the handler checks it, since the balance
    is only known once the orders are read.
    """

    affiliate_id: str
    proof_of_payment: Optional[str] = None

    @field_validator("proof_of_payment")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class ConfirmCashOutDTO(Command):
    cash_out_id: UUID


class SettlementPreviewDTO(BaseModel):
    """Balance preview: what ``PerformCashOut`` would record right now."""

    model_config = ConfigDict(frozen=True)

    affiliate_id: str
    order_ids: List[UUID]
    order_count: int
    total_sales: Decimal
    total_commission: Decimal
    total_delivery_fees: Decimal
    balance: Decimal
    commission_rate_cents: int
    requires_proof_of_payment: bool
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
