"""Affiliate service layer (Use Cases).

Account management for vendors.  None of these operations touches the
stock counter: inventory moves only through the order lifecycle and the
inventory change workflow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.affiliates.exceptions import AffiliateAlreadyExists, AffiliateNotFound
from modules.affiliates.models import Affiliate

if TYPE_CHECKING:
    from modules.affiliates.dtos import (
        ApplyAffiliateDTO,
        SetAffiliateStatusDTO,
        ToggleTemporaryClosureDTO,
        UpdateBankDetailsDTO,
        UpdateDeliveryDTO,
        UpdateScheduleDTO,
    )
    from modules.affiliates.repositories.interfaces import IAffiliateRepository

logger = structlog.get_logger(__name__)


class AffiliateService:
    def __init__(self, affiliate_repository: IAffiliateRepository) -> None:
        self._repo = affiliate_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def apply(self, dto: ApplyAffiliateDTO) -> Affiliate:
        """Register a vendor application (status ``PENDING``).

        Raises:
            AffiliateAlreadyExists: the phone number is already registered.
        """
        if self._repo.get_by_id(dto.phone):
            logger.warning("affiliate.duplicate_application")
            raise AffiliateAlreadyExists("Phone number already registered.")

        affiliate = Affiliate(
            id=dto.phone,
            name=dto.name,
            phone=dto.phone,
            address=dto.address,
            has_delivery_service=dto.has_delivery_service,
            delivery_cost=dto.delivery_cost,
            bank_details=dto.bank_details,
        )
        affiliate = self._repo.save(affiliate)
        logger.info("affiliate.applied", affiliate_id=affiliate.id)
        return affiliate

    @transaction.atomic
    def set_status(self, dto: SetAffiliateStatusDTO) -> Affiliate:
        affiliate = self._locked(dto.affiliate_id)
        old_status = affiliate.status
        affiliate.status = dto.status
        affiliate.save(update_fields=["status"])
        logger.info(
            "affiliate.status_updated",
            affiliate_id=affiliate.id,
            old_status=old_status,
            new_status=dto.status,
        )
        return affiliate

    @transaction.atomic
    def update_delivery(self, dto: UpdateDeliveryDTO) -> Affiliate:
        affiliate = self._locked(dto.affiliate_id)
        affiliate.has_delivery_service = dto.has_delivery_service
        affiliate.delivery_cost = dto.delivery_cost
        fields = ["has_delivery_service", "delivery_cost"]
        if dto.address is not None:
            affiliate.address = dto.address
            fields.append("address")
        affiliate.save(update_fields=fields)
        logger.info("affiliate.delivery_updated", affiliate_id=affiliate.id)
        return affiliate

    @transaction.atomic
    def update_schedule(self, dto: UpdateScheduleDTO) -> Affiliate:
        affiliate = self._locked(dto.affiliate_id)
        schedule = dict(affiliate.schedule or {})
        for day, day_schedule in dto.schedule.items():
            schedule[day] = day_schedule.model_dump()
        affiliate.schedule = schedule
        affiliate.save(update_fields=["schedule"])
        logger.info("affiliate.schedule_updated", affiliate_id=affiliate.id)
        return affiliate

    @transaction.atomic
    def toggle_temporary_closure(self, dto: ToggleTemporaryClosureDTO) -> Affiliate:
        affiliate = self._locked(dto.affiliate_id)
        affiliate.is_temporarily_closed = not affiliate.is_temporarily_closed
        affiliate.save(update_fields=["is_temporarily_closed"])
        logger.info(
            "affiliate.closure_toggled",
            affiliate_id=affiliate.id,
            closed=affiliate.is_temporarily_closed,
        )
        return affiliate

    @transaction.atomic
    def update_bank_details(self, dto: UpdateBankDetailsDTO) -> Affiliate:
        affiliate = self._locked(dto.affiliate_id)
        affiliate.bank_details = dto.bank_details
        affiliate.save(update_fields=["bank_details"])
        logger.info("affiliate.bank_details_updated", affiliate_id=affiliate.id)
        return affiliate

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_affiliate(self, affiliate_id: str) -> Affiliate:
        """Raises ``AffiliateNotFound`` when the id is unknown."""
        affiliate = self._repo.get_by_id(affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {affiliate_id} not found.")
        return affiliate

    def list_affiliates(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[Affiliate]:
        return self._repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locked(self, affiliate_id: str) -> Affiliate:
        affiliate = self._repo.get_for_update(affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {affiliate_id} not found.")
        return affiliate
