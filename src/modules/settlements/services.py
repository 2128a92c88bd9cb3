"""Settlement (cash-out) engine.

Operates on one affiliate at a time, on demand:

1. The unsettled set is the affiliate's FINISHED orders with no
   ``settled_in_cash_out``, ordered by ``(created_at, id)``.
2. Totals come from ``modules.orders.money.summarize`` with the current
   commission rate.
3. ``balance >= 0``: the affiliate paid in cash, the cash-out is COMPLETED
   at once.  ``balance < 0``: the admin pays, a proof of payment is
   required and the cash-out waits for the affiliate's confirmation.
4. The CashOut row and every order pointer are written in one
   transaction, with the affiliate and the orders locked.

``find_inconsistencies`` / ``repair_inconsistencies`` form the
reconciliation sweep comparing order pointers with cash-out coverage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.affiliates.constants import SETTLEABLE_STATUSES
from modules.affiliates.exceptions import AffiliateNotFound
from modules.core.models import PlatformSettings
from modules.orders import money
from modules.orders.constants import OrderStatus
from modules.settlements.constants import CashOutStatus, InconsistencyKind
from modules.settlements.dtos import SettlementPreviewDTO
from modules.settlements.events import CashOutConfirmed, CashOutPerformed
from modules.settlements.exceptions import (
    AffiliateNotSettleable,
    CashOutNotFound,
    NothingToSettle,
    ProofOfPaymentRequired,
)
from modules.settlements.models import CashOut
from shared.domain.exceptions import PartialCommitRisk

if TYPE_CHECKING:
    from modules.affiliates.repositories.interfaces import IAffiliateRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.settlements.dtos import ConfirmCashOutDTO, PerformCashOutDTO
    from modules.settlements.repositories.interfaces import ICashOutRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Inconsistency:
    kind: str
    order_id: str
    cash_out_id: str
    detail: str = ""


@dataclass(frozen=True)
class RepairReport:
    found: int
    repaired: int
    unresolved: List[Inconsistency]


class SettlementService:
    def __init__(
        self,
        cash_out_repository: ICashOutRepository,
        order_repository: IOrderRepository,
        affiliate_repository: IAffiliateRepository,
    ) -> None:
        self._cash_out_repo = cash_out_repository
        self._order_repo = order_repository
        self._affiliate_repo = affiliate_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def unsettled_orders(self, affiliate_id: str) -> List[Order]:
        self._affiliate(affiliate_id)
        return self._order_repo.unsettled_for_affiliate(affiliate_id)

    def preview(self, affiliate_id: str) -> SettlementPreviewDTO:
        """Steps 1-3 of a cash-out without writing anything."""
        self._affiliate(affiliate_id)
        orders = self._order_repo.unsettled_for_affiliate(affiliate_id)
        return self._build_preview(affiliate_id, orders)

    def get_cash_out(self, cash_out_id: str) -> CashOut:
        cash_out = self._cash_out_repo.get_by_id(cash_out_id)
        if not cash_out:
            raise CashOutNotFound(f"Cash-out {cash_out_id} not found.")
        return cash_out

    def list_cash_outs(self, filters: Optional[Dict[str, Any]] = None) -> List[CashOut]:
        return self._cash_out_repo.list(filters)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def perform_cash_out(self, dto: PerformCashOutDTO) -> CashOut:
        """Create the cash-out and mark every covered order as settled.

        Raises:
            AffiliateNotFound: unknown affiliate.
            AffiliateNotSettleable: the affiliate is pending or rejected.
            NothingToSettle: the unsettled set is empty.
            ProofOfPaymentRequired: negative balance without proof.
            PartialCommitRisk: not every covered order could be marked;
                the transaction is rolled back.
        """
        affiliate = self._affiliate_repo.get_for_update(dto.affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {dto.affiliate_id} not found.")
        if affiliate.status not in SETTLEABLE_STATUSES:
            raise AffiliateNotSettleable(
                f"Affiliate {affiliate.id} is {affiliate.status}."
            )

        log = logger.bind(affiliate_id=affiliate.id)
        orders = self._order_repo.unsettled_for_affiliate(affiliate.id, lock=True)
        if not orders:
            log.warning("cashout.nothing_to_settle")
            raise NothingToSettle(f"Affiliate {affiliate.id} has no unsettled orders.")

        preview = self._build_preview(affiliate.id, orders)
        if preview.requires_proof_of_payment and not dto.proof_of_payment:
            log.warning("cashout.proof_missing", balance=str(preview.balance))
            raise ProofOfPaymentRequired(
                "A proof of payment is required when the admin owes the affiliate."
            )

        status = (
            CashOutStatus.PENDING_AFFILIATE_CONFIRMATION
            if preview.requires_proof_of_payment
            else CashOutStatus.COMPLETED
        )
        cash_out = CashOut(
            affiliate=affiliate,
            affiliate_name=affiliate.name,
            orders_covered_ids=[str(order_id) for order_id in preview.order_ids],
            total_sales=preview.total_sales,
            total_commission=preview.total_commission,
            total_delivery_fees=preview.total_delivery_fees,
            balance=preview.balance,
            commission_rate_cents=preview.commission_rate_cents,
            status=status,
            proof_of_payment=dto.proof_of_payment or "",
            start_date=preview.start_date,
            end_date=preview.end_date,
        )
        cash_out.add_domain_event(
            CashOutPerformed(
                aggregate_id=cash_out.id,
                affiliate_id=affiliate.id,
                order_count=preview.order_count,
                balance=str(preview.balance),
                status=status,
            )
        )
        self._cash_out_repo.save(cash_out)

        marked = self._cash_out_repo.mark_orders_settled(cash_out, orders)
        if marked != len(orders):
            log.error("cashout.partial_commit", expected=len(orders), marked=marked)
            raise PartialCommitRisk(
                f"Cash-out {cash_out.id}: marked {marked} of {len(orders)} orders."
            )

        log.info(
            "cashout.performed",
            cash_out_id=str(cash_out.id),
            order_count=preview.order_count,
            balance=str(preview.balance),
            status=status,
        )
        return cash_out

    @transaction.atomic
    def confirm_cash_out(self, dto: ConfirmCashOutDTO) -> CashOut:
        """Affiliate confirms it received the admin's transfer.

        Raises:
            CashOutNotFound: unknown cash-out.
            InvalidCashOutStatus: the cash-out is already completed.
        """
        cash_out = self._cash_out_repo.get_for_update(str(dto.cash_out_id))
        if not cash_out:
            raise CashOutNotFound(f"Cash-out {dto.cash_out_id} not found.")
        cash_out.confirm()
        cash_out.add_domain_event(
            CashOutConfirmed(
                aggregate_id=cash_out.id, affiliate_id=cash_out.affiliate_id
            )
        )
        self._cash_out_repo.save(cash_out)
        logger.info("cashout.confirmed", cash_out_id=str(cash_out.id))
        return cash_out

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def find_inconsistencies(self) -> List[Inconsistency]:
        """Compare order pointers with cash-out coverage in both directions."""
        pointers = self._cash_out_repo.settlement_pointers()
        cash_outs = {str(c.id): c for c in self._cash_out_repo.list()}
        found: List[Inconsistency] = []

        for order_id, (cash_out_id, _status) in pointers.items():
            cash_out = cash_outs.get(cash_out_id)
            if cash_out is None or order_id not in cash_out.covered_ids:
                found.append(
                    Inconsistency(
                        kind=InconsistencyKind.DANGLING_POINTER,
                        order_id=order_id,
                        cash_out_id=cash_out_id,
                    )
                )

        covered: Dict[str, List[str]] = {}
        for cash_out_id, cash_out in cash_outs.items():
            for order_id in cash_out.covered_ids:
                covered.setdefault(order_id, []).append(cash_out_id)

        states = self._cash_out_repo.order_states(list(covered))
        for order_id, owners in covered.items():
            state = states.get(order_id)
            if len(owners) > 1:
                # An order is settled at most once; a human picks the owner.
                found.append(
                    Inconsistency(
                        kind=InconsistencyKind.DUPLICATE_COVERAGE,
                        order_id=order_id,
                        cash_out_id=",".join(sorted(owners)),
                        detail=state[1] if state else "",
                    )
                )
                continue
            cash_out_id = owners[0]
            if state is None:
                found.append(
                    Inconsistency(
                        kind=InconsistencyKind.MISSING_ORDER,
                        order_id=order_id,
                        cash_out_id=cash_out_id,
                    )
                )
                continue
            status, pointer = state
            if not pointer:
                found.append(
                    Inconsistency(
                        kind=InconsistencyKind.MISSING_POINTER,
                        order_id=order_id,
                        cash_out_id=cash_out_id,
                        detail=status,
                    )
                )
            elif pointer != cash_out_id:
                found.append(
                    Inconsistency(
                        kind=InconsistencyKind.CONFLICTING_POINTER,
                        order_id=order_id,
                        cash_out_id=cash_out_id,
                        detail=pointer,
                    )
                )
        return found

    @transaction.atomic
    def repair_inconsistencies(self, dry_run: bool = False) -> RepairReport:
        """Best-effort sweep.

        - Dangling pointers are cleared (the order re-enters the unsettled
          set of its affiliate).
        - Missing pointers are set when the order is FINISHED.
        - Conflicting pointers, duplicate coverage and missing orders need
          a human and are reported as unresolved.
        """
        found = self.find_inconsistencies()
        repaired = 0
        unresolved: List[Inconsistency] = []
        for item in found:
            log = logger.bind(
                kind=item.kind, order_id=item.order_id, cash_out_id=item.cash_out_id
            )
            if item.kind == InconsistencyKind.DANGLING_POINTER:
                if not dry_run:
                    self._cash_out_repo.set_order_pointer(item.order_id, None)
                repaired += 1
                log.warning("reconcile.pointer_cleared", dry_run=dry_run)
            elif (
                item.kind == InconsistencyKind.MISSING_POINTER
                and item.detail == OrderStatus.FINISHED
            ):
                if not dry_run:
                    self._cash_out_repo.set_order_pointer(
                        item.order_id, item.cash_out_id
                    )
                repaired += 1
                log.warning("reconcile.pointer_restored", dry_run=dry_run)
            else:
                unresolved.append(item)
                log.error("reconcile.unresolved", detail=item.detail)

        logger.info(
            "reconcile.completed",
            found=len(found),
            repaired=repaired,
            unresolved=len(unresolved),
            dry_run=dry_run,
        )
        return RepairReport(found=len(found), repaired=repaired, unresolved=unresolved)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_preview(
        self, affiliate_id: str, orders: List[Order]
    ) -> SettlementPreviewDTO:
        rate = PlatformSettings.load().commission_rate_cents
        totals = money.summarize(orders, rate)
        timestamps = [order.created_at for order in orders]
        return SettlementPreviewDTO(
            affiliate_id=affiliate_id,
            order_ids=[order.id for order in orders],
            order_count=totals.order_count,
            total_sales=totals.total_sales,
            total_commission=totals.total_commission,
            total_delivery_fees=totals.total_delivery_fees,
            balance=totals.balance,
            commission_rate_cents=rate,
            requires_proof_of_payment=totals.balance < 0,
            start_date=min(timestamps) if timestamps else None,
            end_date=max(timestamps) if timestamps else None,
        )

    def _affiliate(self, affiliate_id: str):
        affiliate = self._affiliate_repo.get_by_id(affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {affiliate_id} not found.")
        return affiliate
