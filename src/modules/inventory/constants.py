"""Inventory change workflow constants.

Pending (affiliate request) -> Approved (admin) -> Completed (affiliate
confirms receipt), or Pending -> Rejected.  Admin adjustments are created
directly as Approved.
"""

from django.db import models


class InventoryChangeStatus(models.TextChoices):
    PENDING = "PENDING", "Pendiente"
    APPROVED = "APPROVED", "Aprobado"
    REJECTED = "REJECTED", "Rechazado"
    COMPLETED = "COMPLETED", "Completado"


VALID_TRANSITIONS: dict[str, set[str]] = {
    InventoryChangeStatus.PENDING: {
        InventoryChangeStatus.APPROVED,
        InventoryChangeStatus.REJECTED,
    },
    InventoryChangeStatus.APPROVED: {InventoryChangeStatus.COMPLETED},
    InventoryChangeStatus.REJECTED: set(),
    InventoryChangeStatus.COMPLETED: set(),
}

# Decisions an admin can take on a pending request.
RESOLUTIONS: set[str] = {InventoryChangeStatus.APPROVED, InventoryChangeStatus.REJECTED}
