"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  Command
DTOs are immutable and validated at construction, so a handler never
sees a malformed command.

- ``CreateOrderDTO``: customer purchase request.
- ``ConfirmTransferPaymentDTO``: admin confirms a transfer was received.
- ``SetOrderStatusDTO``: lifecycle transition (finish / cancel).
- ``ReopenOrderDTO``: put a cancelled order back to active.
- ``OrderBillDTO``: per-order bill breakdown (output).
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import OrderStatus, PaymentMethod
from shared.domain.commands import Command

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderDTO(Command):
    """Immutable DTO for order creation requests.

    ``coupon_code`` and ``referral_code`` are optional; blank strings are
    treated as absent.
    """

    customer_name: str
    customer_phone: str
    customer_address: str = ""
    affiliate_id: str
    quantity: int
    payment_method: PaymentMethod
    wants_delivery: bool = False
    coupon_code: Optional[str] = None
    referral_code: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("customer_name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Customer name is required.")
        return v.strip()

    @field_validator("customer_phone")
    @classmethod
    def phone_must_have_digits(cls, v: str) -> str:
        digits = re.sub(r"\D", "", v or "")
        if not digits:
            raise ValueError("Phone number must contain digits.")
        return digits

    @field_validator("coupon_code", "referral_code")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().upper()


class ConfirmTransferPaymentDTO(Command):
    order_id: UUID


class SetOrderStatusDTO(Command):
    order_id: UUID
    new_status: OrderStatus
    notes: str = ""

    @field_validator("new_status")
    @classmethod
    def not_initial_status(cls, v: OrderStatus) -> OrderStatus:
        if v == OrderStatus.PENDING_CONFIRMATION:
            raise ValueError("Orders cannot be moved back to PENDING_CONFIRMATION.")
        return v


class ReopenOrderDTO(Command):
    order_id: UUID
    notes: str = ""


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderBillDTO(BaseModel):
    """Bill breakdown for one order, computed from its frozen amounts."""

    model_config = ConfigDict(frozen=True)

    order_id: UUID
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    customer_total: Decimal
    payment_method: str
    commission_rate_cents: int
    commission: Decimal
    amount_affiliate_owes_admin: Decimal
    amount_admin_owes_affiliate: Decimal
    balance_contribution: Decimal
