"""CashOut model.

A cash-out is an immutable settlement batch for one affiliate:
``orders_covered_ids`` is fixed at creation and every covered order's
``settled_in_cash_out`` points back at it.  Only ``status`` (and
``confirmed_at``) change afterwards.

Sign convention for ``balance``: positive means the affiliate owed the
admin, negative means the admin owed the affiliate.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.settlements.constants import CashOutStatus
from modules.settlements.exceptions import InvalidCashOutStatus
from shared.domain.events import DomainEventMixin

_MONEY = {"max_digits": 12, "decimal_places": 2, "default": Decimal("0.00")}


class CashOut(DomainEventMixin, BaseModel):
    affiliate = models.ForeignKey(
        "affiliates.Affiliate",
        on_delete=models.PROTECT,
        related_name="cash_outs",
    )
    affiliate_name = models.CharField(max_length=255)
    orders_covered_ids = models.JSONField(default=list)
    total_sales = models.DecimalField(**_MONEY)
    total_commission = models.DecimalField(**_MONEY)
    total_delivery_fees = models.DecimalField(**_MONEY)
    balance = models.DecimalField(**_MONEY)
    commission_rate_cents = models.PositiveIntegerField()
    status = models.CharField(
        max_length=40,
        choices=CashOutStatus.choices,
        default=CashOutStatus.COMPLETED,
    )
    proof_of_payment = models.TextField(blank=True, default="")
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    confirmed_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "cash_outs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["affiliate", "-created_at"], name="cashout_aff_idx"),
            models.Index(fields=["status"], name="cashout_status_idx"),
        ]

    @property
    def covered_ids(self) -> set[str]:
        return {str(order_id) for order_id in self.orders_covered_ids or []}

    def confirm(self) -> None:
        """PENDING_AFFILIATE_CONFIRMATION -> COMPLETED.

        Raises:
            InvalidCashOutStatus: the cash-out is already completed.
        """
        if self.status != CashOutStatus.PENDING_AFFILIATE_CONFIRMATION:
            raise InvalidCashOutStatus(
                f"Cash-out {self.id} is {self.status}, not awaiting confirmation."
            )
        self.status = CashOutStatus.COMPLETED
        self.confirmed_at = timezone.now()

    def __str__(self) -> str:
        return f"CashOut {self.id} {self.affiliate_id} {self.balance} ({self.status})"
