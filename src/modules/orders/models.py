"""Order and OrderStatusHistory models.

Business rules implemented:
- Each status change generates a history record.
- ``unit_price``, ``total_cost``, ``delivery_fee_applied`` and
  ``discount_applied`` are frozen at creation; later price changes never
  touch them.
- ``settled_in_cash_out`` is set at most once, only for Finished orders,
  and only by the settlement engine (``mark_settled``).
- Customer and affiliate FKs use PROTECT to preserve financial history.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    REOPENABLE_STATES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    PaymentMethod,
)
from modules.orders.exceptions import InvalidOrderStatus, OrderAlreadySettled
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)

_MONEY = {"max_digits": 10, "decimal_places": 2}


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``customer_*`` and ``affiliate_name`` are snapshots taken when the
    order is placed so receipts stay readable if the source records
    change.
    """

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=20, db_index=True)
    customer_address = models.TextField(blank=True, default="")
    affiliate = models.ForeignKey(
        "affiliates.Affiliate",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    affiliate_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(**_MONEY)
    total_cost = models.DecimalField(**_MONEY)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    wants_delivery = models.BooleanField(default=False)
    delivery_fee_applied = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    discount_applied = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    status = models.CharField(
        max_length=30,
        choices=OrderStatus.choices,
        default=OrderStatus.ACTIVE,
    )
    coupon_used = models.CharField(max_length=32, blank=True, default="")
    referral_code_used = models.CharField(max_length=16, blank=True, default="")
    settled_in_cash_out = models.ForeignKey(
        "settlements.CashOut",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="covered_orders",
    )
    is_low_inventory_order = models.BooleanField(default=False)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(
                fields=["affiliate", "status"], name="orders_affiliate_status_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="orders_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    @property
    def is_settled(self) -> bool:
        return self.settled_in_cash_out_id is not None

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    def transition_to(self, new_status: str) -> str:
        """Move to *new_status* and return the previous status.

        Raises:
            InvalidOrderStatus: the state machine forbids the move.
        """
        if not self.can_transition_to(new_status):
            raise InvalidOrderStatus(
                f"Cannot transition from {self.status} to {new_status}."
            )
        old_status = self.status
        self.status = new_status
        return old_status

    def reopen(self) -> str:
        """Put a cancelled order back to ``ACTIVE`` (correction only)."""
        if self.status not in REOPENABLE_STATES:
            raise InvalidOrderStatus(f"Cannot reopen order in status {self.status}.")
        old_status = self.status
        self.status = OrderStatus.ACTIVE
        return old_status

    def mark_settled(self, cash_out) -> None:
        if self.is_settled:
            raise OrderAlreadySettled(f"Order {self.id} is already settled.")
        if self.status != OrderStatus.FINISHED:
            raise InvalidOrderStatus(
                f"Only finished orders can be settled "
                f"(order {self.id} is {self.status})."
            )
        self.settled_in_cash_out = cash_out

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order {self.id} x{self.quantity} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    This model is never edited: each record captures a single status
    change and optional notes (e.g. cancellation reason).
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=30,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(
        max_length=30,
        choices=OrderStatus.choices,
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
