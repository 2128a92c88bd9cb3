"""Inventory change workflow service (Use Cases).

Two parties must agree before stock moves: the admin approves (or
creates) a change, then the affiliate confirms physical receipt.  Only
``confirm_change`` mutates ``Affiliate.inventory``, and it does so under
row locks on both the change and the affiliate, after re-checking the
change's status.  A second confirmation of the same change is rejected
with ``InvalidInventoryChangeStatus``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.affiliates.exceptions import AffiliateNotFound
from modules.inventory.constants import InventoryChangeStatus
from modules.inventory.events import (
    InventoryChangeCompleted,
    InventoryChangeRequested,
    InventoryChangeResolved,
)
from modules.inventory.exceptions import (
    InvalidInventoryChangeStatus,
    InventoryChangeNotFound,
)
from modules.inventory.models import InventoryChange

if TYPE_CHECKING:
    from modules.affiliates.models import Affiliate
    from modules.affiliates.repositories.interfaces import IAffiliateRepository
    from modules.inventory.dtos import (
        AdminAdjustInventoryDTO,
        CancelInventoryRequestDTO,
        ConfirmInventoryChangeDTO,
        RequestInventoryChangeDTO,
        ResolveInventoryChangeDTO,
    )
    from modules.inventory.repositories.interfaces import IInventoryChangeRepository
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AffiliateIndicators:
    affiliate_id: str
    name: str
    status: str
    inventory: int
    is_urgent: bool
    has_pending_request: bool


class InventoryService:
    def __init__(
        self,
        change_repository: IInventoryChangeRepository,
        affiliate_repository: IAffiliateRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._change_repo = change_repository
        self._affiliate_repo = affiliate_repository
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def request_change(self, dto: RequestInventoryChangeDTO) -> InventoryChange:
        """Affiliate asks for ``amount`` tortillas; stock is not touched."""
        affiliate = self._affiliate(dto.affiliate_id)
        change = InventoryChange(
            affiliate=affiliate,
            affiliate_name=affiliate.name,
            amount=dto.amount,
            status=InventoryChangeStatus.PENDING,
        )
        return self._create(change)

    @transaction.atomic
    def admin_adjust(self, dto: AdminAdjustInventoryDTO) -> InventoryChange:
        """Admin-created change, born ``APPROVED`` with a signed amount.

        The affiliate still has to confirm it before stock moves.
        """
        affiliate = self._affiliate(dto.affiliate_id)
        change = InventoryChange(
            affiliate=affiliate,
            affiliate_name=affiliate.name,
            amount=dto.amount,
            status=InventoryChangeStatus.APPROVED,
            requested_by_admin=True,
        )
        return self._create(change)

    @transaction.atomic
    def resolve_change(self, dto: ResolveInventoryChangeDTO) -> InventoryChange:
        """Approve or reject a ``PENDING`` request.  No stock effect.

        Raises:
            InventoryChangeNotFound: unknown change.
            InvalidInventoryChangeStatus: the change is no longer pending.
        """
        change = self._locked(dto.change_id)
        log = logger.bind(change_id=str(change.id), decision=dto.decision)
        try:
            change.transition_to(dto.decision)
        except InvalidInventoryChangeStatus:
            log.warning("inventory.invalid_resolution", current_status=change.status)
            raise
        change.add_domain_event(
            InventoryChangeResolved(
                aggregate_id=change.id,
                affiliate_id=change.affiliate_id,
                status=change.status,
            )
        )
        self._change_repo.save(change)
        log.info("inventory.change_resolved")
        return change

    @transaction.atomic
    def confirm_change(self, dto: ConfirmInventoryChangeDTO) -> InventoryChange:
        """Affiliate confirms receipt: the only step that moves stock.

        After ``inventory += amount``, the affiliate's ``ACTIVE`` orders
        flagged as exceeding stock are cleared when their quantity now
        fits.

        Raises:
            InventoryChangeNotFound: unknown change.
            InvalidInventoryChangeStatus: the change is not ``APPROVED``
                (including an already completed one).
        """
        change = self._locked(dto.change_id)
        log = logger.bind(change_id=str(change.id), affiliate_id=change.affiliate_id)
        try:
            change.transition_to(InventoryChangeStatus.COMPLETED)
        except InvalidInventoryChangeStatus:
            log.warning("inventory.invalid_confirmation", current_status=change.status)
            raise

        affiliate = self._affiliate_repo.get_for_update(change.affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {change.affiliate_id} not found.")
        affiliate.inventory += change.amount
        affiliate.save(update_fields=["inventory"])

        cleared = self._clear_low_inventory_flags(affiliate)

        change.add_domain_event(
            InventoryChangeCompleted(
                aggregate_id=change.id,
                affiliate_id=affiliate.id,
                amount=change.amount,
                new_inventory=affiliate.inventory,
                cleared_orders=cleared,
            )
        )
        self._change_repo.save(change)
        log.info(
            "inventory.change_completed",
            amount=change.amount,
            new_inventory=affiliate.inventory,
            cleared_orders=cleared,
        )
        return change

    @transaction.atomic
    def cancel_request(self, dto: CancelInventoryRequestDTO) -> None:
        """Withdraw a ``PENDING`` request by deleting it.

        Raises:
            InventoryChangeNotFound: unknown change.
            InvalidInventoryChangeStatus: the change was already resolved.
        """
        change = self._locked(dto.change_id)
        if change.status != InventoryChangeStatus.PENDING:
            raise InvalidInventoryChangeStatus(
                f"Only pending requests can be cancelled (change is {change.status})."
            )
        self._change_repo.delete(str(change.id))
        logger.info("inventory.request_cancelled", change_id=str(change.id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_changes(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[InventoryChange]:
        return self._change_repo.list(filters)

    def indicators(self, affiliate_id: str) -> AffiliateIndicators:
        affiliate = self._affiliate(affiliate_id)
        pending = self._change_repo.affiliates_with_pending_requests()
        return self._indicators_for(affiliate, pending)

    def affiliates_by_urgency(self) -> List[AffiliateIndicators]:
        """All affiliates, urgent first, then those with pending requests,
        then by name."""
        pending = self._change_repo.affiliates_with_pending_requests()
        rows = [
            self._indicators_for(affiliate, pending)
            for affiliate in self._affiliate_repo.list()
        ]
        return sorted(
            rows,
            key=lambda row: (
                not row.is_urgent,
                not row.has_pending_request,
                row.name.lower(),
            ),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _indicators_for(
        self, affiliate: Affiliate, pending: set
    ) -> AffiliateIndicators:
        urgent_orders = self._order_repo.active_low_inventory_for_affiliate(
            affiliate.id
        )
        return AffiliateIndicators(
            affiliate_id=affiliate.id,
            name=affiliate.name,
            status=affiliate.status,
            inventory=affiliate.inventory,
            is_urgent=bool(urgent_orders),
            has_pending_request=affiliate.id in pending,
        )

    def _clear_low_inventory_flags(self, affiliate: Affiliate) -> int:
        cleared = 0
        for order in self._order_repo.active_low_inventory_for_affiliate(
            affiliate.id, lock=True
        ):
            if order.quantity <= affiliate.inventory:
                order.is_low_inventory_order = False
                order.save(update_fields=["is_low_inventory_order"])
                cleared += 1
        return cleared

    def _create(self, change: InventoryChange) -> InventoryChange:
        change.add_domain_event(
            InventoryChangeRequested(
                aggregate_id=change.id,
                affiliate_id=change.affiliate_id,
                amount=change.amount,
                requested_by_admin=change.requested_by_admin,
            )
        )
        change = self._change_repo.save(change)
        logger.info(
            "inventory.change_created",
            change_id=str(change.id),
            affiliate_id=change.affiliate_id,
            amount=change.amount,
            status=change.status,
        )
        return change

    def _affiliate(self, affiliate_id: str) -> Affiliate:
        affiliate = self._affiliate_repo.get_by_id(affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {affiliate_id} not found.")
        return affiliate

    def _locked(self, change_id) -> InventoryChange:
        change = self._change_repo.get_for_update(str(change_id))
        if not change:
            raise InventoryChangeNotFound(f"Inventory change {change_id} not found.")
        return change
