"""Affiliate (vendor) model.

Business rules implemented:
- The affiliate id is its phone number (digits only).
- ``inventory`` is written only by the order lifecycle (debit when an
  order is finished) and by the inventory change workflow (when a change
  is completed).  Settings updates never touch it.
- ``inventory`` may be negative after an oversold order is finished.
"""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from typing import Any, Dict, Optional

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.affiliates.constants import WEEKDAYS, AffiliateStatus
from modules.core.models import BaseModel


def _parse_hhmm(value: str) -> time:
    hour, minute = (int(part) for part in value.split(":", 1))
    return time(hour, minute)


class Affiliate(BaseModel):
    id = models.CharField(primary_key=True, max_length=20, editable=False)
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20)
    address = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=AffiliateStatus.choices,
        default=AffiliateStatus.PENDING,
    )
    inventory = models.IntegerField(default=0)
    has_delivery_service = models.BooleanField(default=False)
    delivery_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    schedule = models.JSONField(default=dict, blank=True)
    is_temporarily_closed = models.BooleanField(default=False)
    bank_details = models.TextField(blank=True, default="")

    class Meta:
        db_table = "affiliates"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["status"], name="affiliates_status_idx"),
        ]

    @property
    def is_approved(self) -> bool:
        return self.status == AffiliateStatus.APPROVED

    def day_schedule(self, weekday: int) -> Optional[Dict[str, Any]]:
        return (self.schedule or {}).get(WEEKDAYS[weekday])

    def is_open(self, at: Optional[datetime] = None) -> bool:
        """Whether the affiliate takes orders at *at* (local time).

        Closed when temporarily closed, when the day has no schedule or is
        marked closed, or outside the inclusive [open, close] window.
        """
        if self.is_temporarily_closed:
            return False
        local = timezone.localtime(at or timezone.now())
        day = self.day_schedule(local.weekday())
        if not day or not day.get("is_open"):
            return False
        now = local.time().replace(second=0, microsecond=0)
        return _parse_hhmm(day["open_time"]) <= now <= _parse_hhmm(day["close_time"])

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"
