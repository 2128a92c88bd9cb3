"""Referral and Coupon models.

A Referral links a referrer (an existing customer) to the first order of
a new customer.  Completing it mints exactly one Coupon bound to the
referrer's phone.  The coupon's ``reward_amount`` is frozen at mint time.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.referrals.constants import ReferralStatus
from shared.domain.events import DomainEventMixin


class Referral(DomainEventMixin, BaseModel):
    referrer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="referrals_made",
    )
    referrer_code = models.CharField(max_length=16)
    referrer_name = models.CharField(max_length=255)
    referrer_phone = models.CharField(max_length=20)
    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="referral",
    )
    referee_name = models.CharField(max_length=255)
    referee_phone = models.CharField(max_length=20)
    quantity = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20,
        choices=ReferralStatus.choices,
        default=ReferralStatus.ACTIVE_ORDER,
    )

    class Meta:
        db_table = "referrals"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="referrals_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.referrer_code} -> {self.referee_name} ({self.status})"


class Coupon(BaseModel):
    """Single-use discount token.  The primary key is the coupon code."""

    id = models.CharField(primary_key=True, max_length=32, editable=False)
    referral = models.OneToOneField(
        "referrals.Referral",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="coupon",
    )
    generated_for_phone = models.CharField(max_length=20, blank=True, default="")
    reward_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_used = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "coupons"
        ordering = ["-created_at"]

    @property
    def code(self) -> str:
        return self.id

    def __str__(self) -> str:
        state = "used" if self.is_used else ("active" if self.is_active else "inactive")
        return f"{self.id} ({state})"
