"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Concurrency control on status updates uses ``select_for_update()``;
collected domain events are written to the outbox inside ``save()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.outbox import store_domain_events
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its history prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("affiliate", "settled_in_cash_out")
                .prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters.

        Supported filter keys: any ``Order`` lookup (``status``,
        ``affiliate_id``, ``created_at__range``...).
        """
        queryset = Order.objects.select_related("affiliate")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order and its pending events."""
        entity.save()
        event_count = store_domain_events(entity, topic="orders")
        logger.info("order.saved", order_id=str(entity.id), event_count=event_count)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.deleted", order_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Order-specific queries
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_history(
        self,
        order_id,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history

    def exists_for_phone(self, phone: str) -> bool:
        return Order.objects.filter(customer_phone=phone).exists()

    def unsettled_for_affiliate(
        self, affiliate_id: str, lock: bool = False
    ) -> List[Order]:
        queryset = Order.objects.filter(
            affiliate_id=affiliate_id,
            status=OrderStatus.FINISHED,
            settled_in_cash_out__isnull=True,
        ).order_by("created_at", "id")
        if lock:
            queryset = queryset.select_for_update()
        return list(queryset)

    def active_low_inventory_for_affiliate(
        self, affiliate_id: str, lock: bool = False
    ) -> List[Order]:
        queryset = Order.objects.filter(
            affiliate_id=affiliate_id,
            status=OrderStatus.ACTIVE,
            is_low_inventory_order=True,
        ).order_by("created_at", "id")
        if lock:
            queryset = queryset.select_for_update()
        return list(queryset)
