"""Django ORM implementation of the referral and coupon repositories."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.outbox import store_domain_events
from modules.referrals.models import Coupon, Referral
from modules.referrals.repositories.interfaces import (
    ICouponRepository,
    IReferralRepository,
)

logger = structlog.get_logger(__name__)


class ReferralDjangoRepository(IReferralRepository):
    def get_by_id(self, id: str) -> Optional[Referral]:
        try:
            return Referral.objects.select_related("order").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Referral]:
        try:
            return Referral.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_order(self, order_id, lock: bool = False) -> Optional[Referral]:
        queryset = Referral.objects.filter(order_id=order_id)
        if lock:
            queryset = queryset.select_for_update()
        return queryset.first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Referral]:
        queryset = Referral.objects.select_related("order")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Referral) -> Referral:
        entity.save()
        event_count = store_domain_events(entity, topic="referrals")
        logger.info(
            "referral.saved", referral_id=str(entity.id), event_count=event_count
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Referral.objects.filter(id=id).delete()
        return bool(deleted)


class CouponDjangoRepository(ICouponRepository):
    def get_by_id(self, id: str) -> Optional[Coupon]:
        return Coupon.objects.filter(id=id).first()

    def get_for_update(self, id: str) -> Optional[Coupon]:
        return Coupon.objects.select_for_update().filter(id=id).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Coupon]:
        queryset = Coupon.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def exists(self, code: str) -> bool:
        return Coupon.objects.filter(id=code).exists()

    @transaction.atomic
    def save(self, entity: Coupon) -> Coupon:
        entity.save()
        logger.info("coupon.saved", coupon_code=entity.id)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Coupon.objects.filter(id=id).delete()
        if deleted:
            logger.info("coupon.deleted", coupon_code=id)
        return bool(deleted)
