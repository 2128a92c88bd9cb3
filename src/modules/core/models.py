"""Base abstract models and shared infrastructure models.

Provides:
- ``BaseModel``: UUIDv7 primary key + created_at / updated_at timestamps.
- ``OutboxEvent``: Transactional Outbox pattern for reliable domain events.
- ``PlatformSettings``: tenant-wide configuration (commission rate, unit
  price, referral reward) read by every money computation.
"""

from __future__ import annotations

from decimal import Decimal

import uuid6
from decouple import config
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Transactional Outbox
# ---------------------------------------------------------------------------


class EventStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PUBLISHED = "PUBLISHED", "Published"
    FAILED = "FAILED", "Failed"


class OutboxEvent(BaseModel):
    """Transactional Outbox for reliable domain event delivery.

    Events are persisted in the **same database transaction** as the business
    data that produced them.  The ``core.publish_outbox_events`` task reads
    ``PENDING`` events in creation order and hands them to the in-process
    event bus.

    Workflow:
    1. Repository ``save()`` creates ``OutboxEvent`` rows inside the
       service's ``transaction.atomic()`` block.
    2. Worker queries ``status=PENDING`` ordered by ``created_at``.
    3. On success → ``mark_as_published()``.
    4. On failure → ``mark_as_failed(error)`` increments ``retry_count``.
    """

    event_type = models.CharField(max_length=100)
    payload = models.JSONField()
    aggregate_id = models.CharField(max_length=255)
    topic = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.PENDING,
    )
    processed_at = models.DateTimeField(null=True, blank=True, default=None)
    error_message = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    retry_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "outbox_events"
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["event_type"],
                name="outbox_event_type_idx",
            ),
            models.Index(
                fields=["aggregate_id"],
                name="outbox_aggregate_id_idx",
            ),
            models.Index(
                fields=["status", "created_at"],
                name="outbox_status_created_idx",
            ),
        ]

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def mark_as_published(self) -> None:
        """Mark event as successfully published."""
        self.status = EventStatus.PUBLISHED
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "processed_at", "updated_at"])

    def mark_as_failed(self, error: str) -> None:
        """Mark event as failed and record the error."""
        self.status = EventStatus.FAILED
        self.error_message = error
        self.retry_count += 1
        self.save(
            update_fields=[
                "status",
                "error_message",
                "retry_count",
                "updated_at",
            ]
        )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.event_type} [{self.status}] ({self.aggregate_id})"


# ---------------------------------------------------------------------------
# Platform settings (singleton row)
# ---------------------------------------------------------------------------


def _default_commission_cents() -> int:
    return config("DEFAULT_COMMISSION_PER_TORTILLA_CENTS", default=100, cast=int)


def _default_tortilla_price() -> Decimal:
    return config("TORTILLA_PRICE", default="12.00", cast=Decimal)


def _default_reward_tortillas() -> int:
    return config("REWARD_TORTILLAS", default=10, cast=int)


class PlatformSettings(BaseModel):
    """Tenant-wide configuration.

    The commission rate is **not** stored per order: every balance is
    computed with the rate current at computation time.  The unit price,
    on the other hand, is frozen into each order's subtotal and each
    coupon's reward when they are created.
    """

    commission_rate_cents = models.PositiveIntegerField(
        default=_default_commission_cents
    )
    tortilla_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=_default_tortilla_price,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    reward_tortillas = models.PositiveIntegerField(default=_default_reward_tortillas)
    admin_phone = models.CharField(max_length=20, blank=True, default="")
    bank_details = models.TextField(blank=True, default="")

    class Meta:
        db_table = "platform_settings"

    @classmethod
    def load(cls) -> PlatformSettings:
        """Return the settings row, creating it with defaults on first use."""
        instance = cls.objects.order_by("created_at").first()
        if instance is None:
            instance = cls.objects.create()
        return instance

    def __str__(self) -> str:
        return (
            f"commission={self.commission_rate_cents}c "
            f"price={self.tortilla_price} reward={self.reward_tortillas}"
        )
