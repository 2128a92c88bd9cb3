"""Django ORM implementation of the Affiliate repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.affiliates.models import Affiliate
from modules.affiliates.repositories.interfaces import IAffiliateRepository

logger = structlog.get_logger(__name__)


class AffiliateDjangoRepository(IAffiliateRepository):
    """Concrete Affiliate repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Affiliate]:
        return Affiliate.objects.filter(id=id).first()

    def get_for_update(self, id: str) -> Optional[Affiliate]:
        """Retrieve an affiliate with a row-level lock (SELECT FOR UPDATE)."""
        return Affiliate.objects.select_for_update().filter(id=id).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Affiliate]:
        queryset = Affiliate.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Affiliate) -> Affiliate:
        entity.save()
        logger.info("affiliate.saved", affiliate_id=entity.id)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Affiliate.objects.filter(id=id).delete()
        if deleted:
            logger.info("affiliate.deleted", affiliate_id=id)
        return bool(deleted)
