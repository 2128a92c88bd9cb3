"""Integration tests for the inventory change workflow."""

from __future__ import annotations

import pytest

from modules.inventory.constants import InventoryChangeStatus
from modules.inventory.dtos import (
    AdminAdjustInventoryDTO,
    CancelInventoryRequestDTO,
    ConfirmInventoryChangeDTO,
    RequestInventoryChangeDTO,
    ResolveInventoryChangeDTO,
)
from modules.inventory.exceptions import InvalidInventoryChangeStatus
from modules.inventory.handlers import build_inventory_service
from modules.inventory.models import InventoryChange
from modules.orders.constants import OrderStatus
from modules.orders.dtos import SetOrderStatusDTO

pytestmark = pytest.mark.integration


@pytest.fixture()
def inventory_service():
    return build_inventory_service()


def _approve(service, change):
    return service.resolve_change(
        ResolveInventoryChangeDTO(
            change_id=change.id, decision=InventoryChangeStatus.APPROVED
        )
    )


class TestRequestResolveConfirm:
    def test_stock_moves_only_on_confirmation(self, affiliate, inventory_service):
        change = inventory_service.request_change(
            RequestInventoryChangeDTO(affiliate_id=affiliate.id, amount=50)
        )
        assert change.status == InventoryChangeStatus.PENDING

        _approve(inventory_service, change)
        affiliate.refresh_from_db()
        assert affiliate.inventory == 100

        completed = inventory_service.confirm_change(
            ConfirmInventoryChangeDTO(change_id=change.id)
        )

        assert completed.status == InventoryChangeStatus.COMPLETED
        assert completed.completed_at is not None
        affiliate.refresh_from_db()
        assert affiliate.inventory == 150

    def test_second_confirmation_is_rejected(self, affiliate, inventory_service):
        change = inventory_service.request_change(
            RequestInventoryChangeDTO(affiliate_id=affiliate.id, amount=50)
        )
        _approve(inventory_service, change)
        dto = ConfirmInventoryChangeDTO(change_id=change.id)
        inventory_service.confirm_change(dto)

        with pytest.raises(InvalidInventoryChangeStatus):
            inventory_service.confirm_change(dto)

        affiliate.refresh_from_db()
        assert affiliate.inventory == 150

    def test_pending_change_cannot_be_confirmed(self, affiliate, inventory_service):
        change = inventory_service.request_change(
            RequestInventoryChangeDTO(affiliate_id=affiliate.id, amount=50)
        )
        with pytest.raises(InvalidInventoryChangeStatus):
            inventory_service.confirm_change(
                ConfirmInventoryChangeDTO(change_id=change.id)
            )

    def test_rejected_change_is_final(self, affiliate, inventory_service):
        change = inventory_service.request_change(
            RequestInventoryChangeDTO(affiliate_id=affiliate.id, amount=50)
        )
        inventory_service.resolve_change(
            ResolveInventoryChangeDTO(
                change_id=change.id, decision=InventoryChangeStatus.REJECTED
            )
        )

        with pytest.raises(InvalidInventoryChangeStatus):
            _approve(inventory_service, change)
        affiliate.refresh_from_db()
        assert affiliate.inventory == 100


class TestAdminAdjustment:
    def test_negative_adjustment_needs_confirmation(
        self, affiliate, inventory_service
    ):
        change = inventory_service.admin_adjust(
            AdminAdjustInventoryDTO(affiliate_id=affiliate.id, amount=-30)
        )
        assert change.status == InventoryChangeStatus.APPROVED
        assert change.requested_by_admin is True

        inventory_service.confirm_change(ConfirmInventoryChangeDTO(change_id=change.id))

        affiliate.refresh_from_db()
        assert affiliate.inventory == 70


class TestCancelRequest:
    def test_pending_request_is_deleted(self, affiliate, inventory_service):
        change = inventory_service.request_change(
            RequestInventoryChangeDTO(affiliate_id=affiliate.id, amount=10)
        )
        inventory_service.cancel_request(CancelInventoryRequestDTO(change_id=change.id))
        assert not InventoryChange.objects.exists()

    def test_approved_request_cannot_be_cancelled(self, affiliate, inventory_service):
        change = inventory_service.request_change(
            RequestInventoryChangeDTO(affiliate_id=affiliate.id, amount=10)
        )
        _approve(inventory_service, change)
        with pytest.raises(InvalidInventoryChangeStatus):
            inventory_service.cancel_request(
                CancelInventoryRequestDTO(change_id=change.id)
            )


class TestLowInventoryFlags:
    def test_completion_clears_flags_that_now_fit(
        self, make_affiliate, platform_settings, place_order, inventory_service
    ):
        low = make_affiliate(inventory=5)
        fits = place_order(low, quantity=20)
        too_big = place_order(low, quantity=80, phone="5598760003")
        assert fits.is_low_inventory_order and too_big.is_low_inventory_order

        change = inventory_service.admin_adjust(
            AdminAdjustInventoryDTO(affiliate_id=low.id, amount=45)
        )
        inventory_service.confirm_change(ConfirmInventoryChangeDTO(change_id=change.id))

        fits.refresh_from_db()
        too_big.refresh_from_db()
        assert fits.is_low_inventory_order is False
        assert too_big.is_low_inventory_order is True

    def test_cancelled_orders_keep_their_flag(
        self,
        make_affiliate,
        platform_settings,
        place_order,
        order_service,
        inventory_service,
    ):
        low = make_affiliate(inventory=0)
        order = place_order(low, quantity=10)
        order_service.set_status(
            SetOrderStatusDTO(order_id=order.id, new_status=OrderStatus.CANCELLED)
        )

        change = inventory_service.admin_adjust(
            AdminAdjustInventoryDTO(affiliate_id=low.id, amount=50)
        )
        inventory_service.confirm_change(ConfirmInventoryChangeDTO(change_id=change.id))

        order.refresh_from_db()
        assert order.is_low_inventory_order is True


class TestIndicators:
    def test_urgent_and_pending_flags(
        self, make_affiliate, platform_settings, place_order, inventory_service
    ):
        urgent = make_affiliate(phone="5511110001", name="Zeta", inventory=0)
        waiting = make_affiliate(phone="5511110002", name="Beta")
        calm = make_affiliate(phone="5511110003", name="Alfa")
        place_order(urgent, quantity=5)
        inventory_service.request_change(
            RequestInventoryChangeDTO(affiliate_id=waiting.id, amount=10)
        )

        indicators = inventory_service.indicators(urgent.id)
        assert indicators.is_urgent is True
        assert indicators.has_pending_request is False

        rows = inventory_service.affiliates_by_urgency()
        ordered = [row.affiliate_id for row in rows]
        assert ordered == [urgent.id, waiting.id, calm.id]
