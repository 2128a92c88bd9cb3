"""Settlement (cash-out) constants."""

from django.db import models


class CashOutStatus(models.TextChoices):
    PENDING_AFFILIATE_CONFIRMATION = (
        "PENDING_AFFILIATE_CONFIRMATION",
        "Pendiente de confirmación del afiliado",
    )
    COMPLETED = "COMPLETED", "Completado"


class InconsistencyKind(models.TextChoices):
    # Order points at a cash-out that does not list it.
    DANGLING_POINTER = "DANGLING_POINTER", "Dangling pointer"
    # Cash-out lists an order that has no pointer.
    MISSING_POINTER = "MISSING_POINTER", "Missing pointer"
    # Cash-out lists an order that points at another cash-out.
    CONFLICTING_POINTER = "CONFLICTING_POINTER", "Conflicting pointer"
    # Cash-out lists an order that no longer exists.
    MISSING_ORDER = "MISSING_ORDER", "Missing order"
    # Two or more cash-outs list the same order.
    DUPLICATE_COVERAGE = "DUPLICATE_COVERAGE", "Duplicate coverage"
