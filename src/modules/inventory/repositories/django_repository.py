"""Django ORM implementation of the InventoryChange repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.outbox import store_domain_events
from modules.inventory.constants import InventoryChangeStatus
from modules.inventory.models import InventoryChange
from modules.inventory.repositories.interfaces import IInventoryChangeRepository

logger = structlog.get_logger(__name__)


class InventoryChangeDjangoRepository(IInventoryChangeRepository):
    def get_by_id(self, id: str) -> Optional[InventoryChange]:
        try:
            return InventoryChange.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[InventoryChange]:
        """Retrieve a change with a row-level lock (SELECT FOR UPDATE)."""
        try:
            return InventoryChange.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[InventoryChange]:
        queryset = InventoryChange.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: InventoryChange) -> InventoryChange:
        entity.save()
        event_count = store_domain_events(entity, topic="inventory")
        logger.info(
            "inventory.change_saved",
            change_id=str(entity.id),
            status=entity.status,
            event_count=event_count,
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = InventoryChange.objects.filter(id=id).delete()
        return bool(deleted)

    def affiliates_with_pending_requests(self) -> Set[str]:
        return set(
            InventoryChange.objects.filter(
                status=InventoryChangeStatus.PENDING
            ).values_list("affiliate_id", flat=True)
        )
