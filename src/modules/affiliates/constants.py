"""Affiliate domain constants."""

from django.db import models


class AffiliateStatus(models.TextChoices):
    PENDING = "PENDING", "Pendiente"
    APPROVED = "APPROVED", "Aprobado"
    REJECTED = "REJECTED", "Rechazado"
    SUSPENDED = "SUSPENDED", "Suspendido"


# Indexed like ``datetime.weekday()`` (Monday == 0).
WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Statuses whose balances can still be settled.
SETTLEABLE_STATUSES: set[str] = {AffiliateStatus.APPROVED, AffiliateStatus.SUSPENDED}
