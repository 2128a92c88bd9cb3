"""Unit tests for order command validation."""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import CreateOrderDTO, SetOrderStatusDTO

pytestmark = pytest.mark.unit


def _create(**overrides):
    data = {
        "customer_name": "Ana Martínez",
        "customer_phone": "55 9876 0001",
        "affiliate_id": "5512340001",
        "quantity": 10,
        "payment_method": "CASH",
    }
    data.update(overrides)
    return CreateOrderDTO(**data)


def test_valid_order_normalizes_phone():
    dto = _create()
    assert dto.customer_phone == "5598760001"
    assert dto.payment_method == PaymentMethod.CASH


@pytest.mark.parametrize("quantity", [0, -3])
def test_quantity_must_be_positive(quantity):
    with pytest.raises(ValidationError, match="at least 1"):
        _create(quantity=quantity)


def test_unknown_payment_method_rejected():
    with pytest.raises(ValidationError):
        _create(payment_method="CARD")


def test_blank_codes_are_absent_and_codes_uppercased():
    dto = _create(coupon_code="  ", referral_code=" ana0001 ")
    assert dto.coupon_code is None
    assert dto.referral_code == "ANA0001"


def test_command_is_immutable():
    dto = _create()
    with pytest.raises(ValidationError):
        dto.quantity = 5


def test_cannot_move_back_to_pending_confirmation():
    with pytest.raises(ValidationError):
        SetOrderStatusDTO(
            order_id=uuid4(), new_status=OrderStatus.PENDING_CONFIRMATION
        )


def test_order_id_must_be_uuid():
    with pytest.raises(ValidationError):
        SetOrderStatusDTO(order_id="not-a-uuid", new_status=OrderStatus.FINISHED)
