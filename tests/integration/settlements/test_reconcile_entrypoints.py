"""The reconcile_settlements management command and Celery task."""

from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command

from modules.orders.models import Order
from modules.settlements.dtos import PerformCashOutDTO
from modules.settlements.handlers import build_settlement_service
from modules.settlements.tasks import reconcile_settlements

pytestmark = pytest.mark.integration


@pytest.fixture()
def broken_pointer(affiliate, place_order, finish_order):
    order = finish_order(place_order(affiliate))
    build_settlement_service().perform_cash_out(
        PerformCashOutDTO(affiliate_id=affiliate.id)
    )
    Order.objects.filter(pk=order.pk).update(settled_in_cash_out=None)
    return order


class TestCommand:
    def test_reports_consistent_state(self):
        out = StringIO()
        call_command("reconcile_settlements", stdout=out)
        assert "Found 0, repaired 0, unresolved 0." in out.getvalue()
        assert "consistent" in out.getvalue()

    def test_dry_run_does_not_write(self, broken_pointer):
        out = StringIO()
        call_command("reconcile_settlements", "--dry-run", stdout=out)

        assert "repaired 1" in out.getvalue()
        broken_pointer.refresh_from_db()
        assert broken_pointer.settled_in_cash_out_id is None

    def test_repairs_pointer(self, broken_pointer):
        call_command("reconcile_settlements", stdout=StringIO())

        broken_pointer.refresh_from_db()
        assert broken_pointer.settled_in_cash_out_id is not None


class TestTask:
    def test_returns_summary(self, broken_pointer):
        result = reconcile_settlements()

        assert result == {"found": 1, "repaired": 1, "unresolved": []}
        broken_pointer.refresh_from_db()
        assert broken_pointer.settled_in_cash_out_id is not None
