"""Lock ordering of OrderService.set_status with mocked repositories."""

from __future__ import annotations

from unittest.mock import MagicMock, call
from uuid import uuid4

import pytest

from modules.affiliates.exceptions import AffiliateNotFound
from modules.affiliates.models import Affiliate
from modules.orders.constants import OrderStatus
from modules.orders.dtos import SetOrderStatusDTO
from modules.orders.exceptions import OrderNotFound
from modules.orders.models import Order
from modules.orders.services import OrderService

pytestmark = pytest.mark.unit

AFFILIATE_ID = "5512340001"


@pytest.fixture()
def locks():
    """Both repositories hang off one parent so call order is recorded."""
    parent = MagicMock()
    affiliate = Affiliate(id=AFFILIATE_ID, name="Doña Lupe", inventory=100)
    affiliate.save = MagicMock()
    order = Order(
        id=uuid4(),
        affiliate_id=AFFILIATE_ID,
        quantity=10,
        status=OrderStatus.ACTIVE,
    )
    parent.orders.get_by_id.return_value = order
    parent.orders.get_for_update.return_value = order
    parent.affiliates.get_for_update.return_value = affiliate
    service = OrderService(
        order_repository=parent.orders,
        affiliate_repository=parent.affiliates,
        customer_service=MagicMock(),
        referral_service=MagicMock(),
    )
    return service, parent, order, affiliate


def test_affiliate_is_locked_before_the_order(locks):
    service, parent, order, affiliate = locks

    service.set_status(
        SetOrderStatusDTO(order_id=order.id, new_status=OrderStatus.FINISHED)
    )

    lock_calls = [
        c
        for c in parent.mock_calls
        if c[0] in ("affiliates.get_for_update", "orders.get_for_update")
    ]
    assert lock_calls == [
        call.affiliates.get_for_update(AFFILIATE_ID),
        call.orders.get_for_update(str(order.id)),
    ]
    assert affiliate.inventory == 90


def test_missing_order_takes_no_lock(locks):
    service, parent, order, _ = locks
    parent.orders.get_by_id.return_value = None

    with pytest.raises(OrderNotFound):
        service.set_status(
            SetOrderStatusDTO(order_id=order.id, new_status=OrderStatus.FINISHED)
        )
    parent.affiliates.get_for_update.assert_not_called()


def test_missing_affiliate(locks):
    service, parent, order, _ = locks
    parent.affiliates.get_for_update.return_value = None

    with pytest.raises(AffiliateNotFound):
        service.set_status(
            SetOrderStatusDTO(order_id=order.id, new_status=OrderStatus.CANCELLED)
        )
    parent.orders.get_for_update.assert_not_called()
