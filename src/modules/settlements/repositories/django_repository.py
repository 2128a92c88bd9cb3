"""Django ORM implementation of the cash-out repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.outbox import store_domain_events
from modules.orders.models import Order
from modules.settlements.models import CashOut
from modules.settlements.repositories.interfaces import ICashOutRepository

logger = structlog.get_logger(__name__)


class CashOutDjangoRepository(ICashOutRepository):
    def get_by_id(self, id: str) -> Optional[CashOut]:
        try:
            return CashOut.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[CashOut]:
        try:
            return CashOut.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[CashOut]:
        queryset = CashOut.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: CashOut) -> CashOut:
        entity.save()
        event_count = store_domain_events(entity, topic="settlements")
        logger.info(
            "cashout.saved", cash_out_id=str(entity.id), event_count=event_count
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = CashOut.objects.filter(id=id).delete()
        return bool(deleted)

    @transaction.atomic
    def mark_orders_settled(self, cash_out: CashOut, orders: List[Order]) -> int:
        for order in orders:
            order.mark_settled(cash_out)
            order.save(update_fields=["settled_in_cash_out"])
        return Order.objects.filter(settled_in_cash_out=cash_out).count()

    def settlement_pointers(self) -> Dict[str, Tuple[str, str]]:
        rows = Order.objects.filter(settled_in_cash_out__isnull=False).values_list(
            "id", "settled_in_cash_out_id", "status"
        )
        return {
            str(order_id): (str(cash_out_id), status)
            for order_id, cash_out_id, status in rows
        }

    def order_states(self, order_ids: List[str]) -> Dict[str, Tuple[str, str]]:
        rows = Order.objects.filter(id__in=order_ids).values_list(
            "id", "status", "settled_in_cash_out_id"
        )
        return {
            str(order_id): (status, str(cash_out_id) if cash_out_id else "")
            for order_id, status, cash_out_id in rows
        }

    @transaction.atomic
    def set_order_pointer(self, order_id: str, cash_out_id) -> int:
        return Order.objects.filter(id=order_id).update(
            settled_in_cash_out_id=cash_out_id
        )
