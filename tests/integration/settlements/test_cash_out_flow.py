"""Integration tests for cash-outs and the reconciliation sweep."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.utils import timezone

from modules.orders.constants import PaymentMethod
from modules.orders.models import Order
from modules.settlements.constants import CashOutStatus, InconsistencyKind
from modules.settlements.dtos import ConfirmCashOutDTO, PerformCashOutDTO
from modules.settlements.exceptions import (
    InvalidCashOutStatus,
    NothingToSettle,
    ProofOfPaymentRequired,
)
from modules.settlements.handlers import build_settlement_service
from modules.settlements.models import CashOut

pytestmark = pytest.mark.integration


@pytest.fixture()
def settlement_service():
    return build_settlement_service()


class TestScenarios:
    def test_cash_order_settles_immediately(
        self, affiliate, place_order, finish_order, settlement_service
    ):
        order = place_order(affiliate, quantity=10)
        finish_order(order)

        cash_out = settlement_service.perform_cash_out(
            PerformCashOutDTO(affiliate_id=affiliate.id)
        )

        assert cash_out.total_sales == Decimal("120.00")
        assert cash_out.total_commission == Decimal("10.00")
        assert cash_out.balance == Decimal("110.00")
        assert cash_out.status == CashOutStatus.COMPLETED
        order.refresh_from_db()
        assert order.settled_in_cash_out_id == cash_out.id

    def test_transfer_order_requires_proof_then_confirmation(
        self, affiliate, place_order, finish_order, settlement_service
    ):
        order = place_order(
            affiliate,
            quantity=10,
            payment_method=PaymentMethod.TRANSFER,
            wants_delivery=True,
        )
        finish_order(order)

        with pytest.raises(ProofOfPaymentRequired):
            settlement_service.perform_cash_out(
                PerformCashOutDTO(affiliate_id=affiliate.id)
            )
        assert not CashOut.objects.exists()
        assert Order.objects.get(pk=order.pk).settled_in_cash_out_id is None

        cash_out = settlement_service.perform_cash_out(
            PerformCashOutDTO(affiliate_id=affiliate.id, proof_of_payment="SPEI-99")
        )
        assert cash_out.balance == Decimal("-30.00")
        assert cash_out.status == CashOutStatus.PENDING_AFFILIATE_CONFIRMATION

        confirmed = settlement_service.confirm_cash_out(
            ConfirmCashOutDTO(cash_out_id=cash_out.id)
        )
        assert confirmed.status == CashOutStatus.COMPLETED
        assert confirmed.confirmed_at is not None

        with pytest.raises(InvalidCashOutStatus):
            settlement_service.confirm_cash_out(
                ConfirmCashOutDTO(cash_out_id=cash_out.id)
            )


class TestPartition:
    def test_round_trip_empties_unsettled_set(
        self, affiliate, place_order, finish_order, settlement_service
    ):
        for phone in ("5598760001", "5598760002", "5598760003"):
            finish_order(place_order(affiliate, phone=phone))
        place_order(affiliate, phone="5598760004")  # still active

        preview = settlement_service.preview(affiliate.id)
        assert preview.order_count == 3

        cash_out = settlement_service.perform_cash_out(
            PerformCashOutDTO(affiliate_id=affiliate.id)
        )

        assert len(cash_out.orders_covered_ids) == 3
        assert settlement_service.unsettled_orders(affiliate.id) == []
        with pytest.raises(NothingToSettle):
            settlement_service.perform_cash_out(
                PerformCashOutDTO(affiliate_id=affiliate.id)
            )

    def test_each_order_lands_in_exactly_one_cash_out(
        self, affiliate, place_order, finish_order, settlement_service
    ):
        dto = PerformCashOutDTO(affiliate_id=affiliate.id)
        finish_order(place_order(affiliate, phone="5598760001"))
        first = settlement_service.perform_cash_out(dto)
        finish_order(place_order(affiliate, phone="5598760002"))
        second = settlement_service.perform_cash_out(dto)

        assert first.covered_ids.isdisjoint(second.covered_ids)
        settled = Order.objects.filter(settled_in_cash_out__isnull=False)
        assert settled.count() == 2

    def test_other_affiliates_orders_untouched(
        self, make_affiliate, platform_settings, place_order, finish_order,
        settlement_service,
    ):
        mine = make_affiliate(phone="5511110001")
        theirs = make_affiliate(phone="5511110002")
        finish_order(place_order(mine, phone="5598760001"))
        other = finish_order(place_order(theirs, phone="5598760002"))

        settlement_service.perform_cash_out(PerformCashOutDTO(affiliate_id=mine.id))

        other.refresh_from_db()
        assert other.settled_in_cash_out_id is None


class TestReconciliation:
    def test_clean_state_has_no_inconsistencies(
        self, affiliate, place_order, finish_order, settlement_service
    ):
        finish_order(place_order(affiliate))
        settlement_service.perform_cash_out(
            PerformCashOutDTO(affiliate_id=affiliate.id)
        )
        assert settlement_service.find_inconsistencies() == []

    def test_repairs_missing_and_dangling_pointers(
        self, affiliate, place_order, finish_order, settlement_service
    ):
        covered = finish_order(place_order(affiliate, phone="5598760001"))
        cash_out = settlement_service.perform_cash_out(
            PerformCashOutDTO(affiliate_id=affiliate.id)
        )
        stray = finish_order(place_order(affiliate, phone="5598760002"))

        # Lose one pointer and add one the cash-out does not know about.
        Order.objects.filter(pk=covered.pk).update(settled_in_cash_out=None)
        Order.objects.filter(pk=stray.pk).update(settled_in_cash_out=cash_out)

        kinds = {item.kind for item in settlement_service.find_inconsistencies()}
        assert kinds == {
            InconsistencyKind.MISSING_POINTER,
            InconsistencyKind.DANGLING_POINTER,
        }

        report = settlement_service.repair_inconsistencies()

        assert report.found == 2
        assert report.repaired == 2
        assert report.unresolved == []
        covered.refresh_from_db()
        stray.refresh_from_db()
        assert covered.settled_in_cash_out_id == cash_out.id
        assert stray.settled_in_cash_out_id is None
        assert settlement_service.find_inconsistencies() == []

    def test_missing_order_is_unresolved(self, affiliate, settlement_service):
        CashOut.objects.create(
            affiliate=affiliate,
            affiliate_name=affiliate.name,
            orders_covered_ids=["0b4c5a3e-1d2f-4a6b-8c9d-0e1f2a3b4c5d"],
            total_sales=Decimal("0.00"),
            total_commission=Decimal("0.00"),
            total_delivery_fees=Decimal("0.00"),
            balance=Decimal("0.00"),
            commission_rate_cents=100,
            status=CashOutStatus.COMPLETED,
            start_date=timezone.now(),
            end_date=timezone.now(),
        )

        report = settlement_service.repair_inconsistencies()

        assert report.repaired == 0
        assert [item.kind for item in report.unresolved] == [
            InconsistencyKind.MISSING_ORDER
        ]

    def test_order_listed_by_two_cash_outs_is_unresolved(
        self, affiliate, place_order, finish_order, settlement_service
    ):
        order = finish_order(place_order(affiliate))
        first = settlement_service.perform_cash_out(
            PerformCashOutDTO(affiliate_id=affiliate.id)
        )
        second = CashOut.objects.create(
            affiliate=affiliate,
            affiliate_name=affiliate.name,
            orders_covered_ids=[str(order.id)],
            total_sales=Decimal("0.00"),
            total_commission=Decimal("0.00"),
            total_delivery_fees=Decimal("0.00"),
            balance=Decimal("0.00"),
            commission_rate_cents=100,
            status=CashOutStatus.COMPLETED,
            start_date=timezone.now(),
            end_date=timezone.now(),
        )

        found = settlement_service.find_inconsistencies()
        assert [item.kind for item in found] == [InconsistencyKind.DUPLICATE_COVERAGE]
        assert found[0].order_id == str(order.id)
        assert set(found[0].cash_out_id.split(",")) == {str(first.id), str(second.id)}

        report = settlement_service.repair_inconsistencies()

        assert report.repaired == 0
        assert [item.kind for item in report.unresolved] == [
            InconsistencyKind.DUPLICATE_COVERAGE
        ]
        order.refresh_from_db()
        assert order.settled_in_cash_out_id == first.id
