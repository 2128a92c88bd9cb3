"""Dashboard figures, platform settings and development seeding."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from modules.affiliates.models import Affiliate
from modules.core.models import PlatformSettings
from modules.orders.models import Order
from modules.orders.stats import DashboardService

pytestmark = pytest.mark.integration


class TestDashboardService:
    def test_empty_database(self):
        stats = DashboardService().get_stats()

        assert stats.total_orders == 0
        assert stats.total_sales == Decimal("0.00")
        assert stats.tortillas_sold == 0

    def test_counts_and_sales(
        self, affiliate, make_affiliate, place_order, finish_order
    ):
        make_affiliate(phone="5511110009", status="PENDING")
        finish_order(place_order(affiliate, quantity=10, wants_delivery=True))
        place_order(affiliate, quantity=5, payment_method="TRANSFER")
        place_order(affiliate, quantity=500, phone="5598760003")  # low stock

        stats = DashboardService().get_stats()

        assert stats.total_orders == 3
        assert stats.total_affiliates == 2
        assert stats.pending_affiliates == 1
        assert stats.pending_transfers == 1
        assert stats.total_sales == Decimal("140.00")
        assert stats.tortillas_sold == 10
        assert stats.urgent_affiliates == 1

    def test_window_applies_to_orders(self, affiliate, place_order, finish_order):
        old = finish_order(place_order(affiliate))
        Order.objects.filter(pk=old.pk).update(
            created_at=timezone.now() - timedelta(days=30)
        )
        finish_order(place_order(affiliate, phone="5598760002"))

        stats = DashboardService().get_stats(
            start=timezone.now() - timedelta(days=1)
        )

        assert stats.total_orders == 1
        assert stats.total_sales == Decimal("120.00")
        assert stats.total_affiliates == 1


class TestPlatformSettingsApi:
    url = "/api/v1/settings"

    def test_get(self, auth_client, platform_settings):
        response = auth_client.get(self.url)

        assert response.status_code == 200
        assert response.json()["commission_rate_cents"] == 100

    def test_patch_updates_only_given_fields(self, auth_client, platform_settings):
        response = auth_client.patch(
            self.url, {"commission_rate_cents": 150}, format="json"
        )

        assert response.status_code == 200
        settings_row = PlatformSettings.load()
        assert settings_row.commission_rate_cents == 150
        assert settings_row.tortilla_price == Decimal("12.00")

    def test_patch_rejects_negative_rate(self, auth_client, platform_settings):
        response = auth_client.patch(
            self.url, {"commission_rate_cents": -1}, format="json"
        )

        assert response.status_code == 400
        assert PlatformSettings.load().commission_rate_cents == 100

    def test_rate_change_does_not_touch_frozen_prices(
        self, auth_client, affiliate, place_order
    ):
        order = place_order(affiliate)
        auth_client.patch(self.url, {"tortilla_price": "15.00"}, format="json")

        order.refresh_from_db()
        assert order.unit_price == Decimal("12.00")


def test_seed_data_creates_approved_affiliates_and_orders():
    out = StringIO()
    call_command("seed_data", stdout=out)

    assert Affiliate.objects.filter(status="APPROVED").count() == 3
    assert Order.objects.count() == 6
    assert "Seed completed" in out.getvalue()

    call_command("seed_data", stdout=StringIO())
    assert Affiliate.objects.count() == 3
