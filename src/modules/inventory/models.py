"""InventoryChange model.

Business rules implemented:
- ``amount`` is signed: positive adds stock, negative removes it.
  Affiliate requests are always positive.
- The affiliate's stock changes exactly once, on Approved -> Completed.
- Cancelling a pending request deletes the row.
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.inventory.constants import VALID_TRANSITIONS, InventoryChangeStatus
from modules.inventory.exceptions import InvalidInventoryChangeStatus
from shared.domain.events import DomainEventMixin


class InventoryChange(DomainEventMixin, BaseModel):
    affiliate = models.ForeignKey(
        "affiliates.Affiliate",
        on_delete=models.PROTECT,
        related_name="inventory_changes",
    )
    affiliate_name = models.CharField(max_length=255)
    amount = models.IntegerField()
    status = models.CharField(
        max_length=20,
        choices=InventoryChangeStatus.choices,
        default=InventoryChangeStatus.PENDING,
    )
    requested_by_admin = models.BooleanField(default=False)
    resolved_at = models.DateTimeField(null=True, blank=True, default=None)
    completed_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "inventory_changes"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["affiliate", "status"], name="invchg_affiliate_status_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(amount=0),
                name="inventory_changes_amount_not_zero",
            ),
        ]

    def transition_to(self, new_status: str) -> str:
        """Move to *new_status*, stamping the time; returns the old status.

        Raises:
            InvalidInventoryChangeStatus: the workflow forbids the move.
        """
        if new_status not in VALID_TRANSITIONS.get(self.status, set()):
            raise InvalidInventoryChangeStatus(
                f"Cannot move inventory change {self.id} from "
                f"{self.status} to {new_status}."
            )
        old_status = self.status
        self.status = new_status
        now = timezone.now()
        if new_status == InventoryChangeStatus.COMPLETED:
            self.completed_at = now
        else:
            self.resolved_at = now
        return old_status

    def __str__(self) -> str:
        return f"{self.affiliate_id} {self.amount:+d} ({self.status})"
