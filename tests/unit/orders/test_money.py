"""Unit tests for the per-order and per-batch settlement arithmetic."""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest

from modules.orders import money

pytestmark = pytest.mark.unit

RATE = 100  # cents per tortilla


def _order(
    quantity=10,
    payment_method="CASH",
    total_cost="120.00",
    delivery_fee="0.00",
    discount="0.00",
):
    return SimpleNamespace(
        quantity=quantity,
        payment_method=payment_method,
        total_cost=Decimal(total_cost),
        delivery_fee_applied=Decimal(delivery_fee),
        discount_applied=Decimal(discount),
    )


class TestCashOrder:
    def test_commission_is_quantity_times_rate(self):
        assert money.commission(_order(), RATE) == Decimal("10.00")

    def test_affiliate_owes_admin_subtotal_minus_commission(self):
        order = _order()
        assert money.amount_affiliate_owes_admin(order, RATE) == Decimal("110.00")
        assert money.amount_admin_owes_affiliate(order, RATE) == Decimal("0")
        assert money.balance_contribution(order, RATE) == Decimal("110.00")

    def test_delivery_fee_stays_with_affiliate(self):
        order = _order(delivery_fee="25.00")
        assert money.amount_affiliate_owes_admin(order, RATE) == Decimal("110.00")
        assert money.customer_total(order) == Decimal("145.00")

    def test_discount_reduces_what_the_affiliate_owes(self):
        order = _order(discount="30.00")
        assert money.amount_affiliate_owes_admin(order, RATE) == Decimal("80.00")


class TestTransferOrder:
    def test_admin_owes_commission_plus_delivery(self):
        order = _order(payment_method="TRANSFER", delivery_fee="20.00")
        assert money.amount_admin_owes_affiliate(order, RATE) == Decimal("30.00")
        assert money.amount_affiliate_owes_admin(order, RATE) == Decimal("0")
        assert money.balance_contribution(order, RATE) == Decimal("-30.00")


class TestCustomerTotal:
    @pytest.mark.parametrize(
        "total_cost,delivery_fee,discount,expected",
        [
            ("120.00", "0.00", "0.00", "120.00"),
            ("120.00", "20.00", "0.00", "140.00"),
            ("120.00", "20.00", "120.00", "20.00"),
        ],
    )
    def test_identity(self, total_cost, delivery_fee, discount, expected):
        order = _order(
            total_cost=total_cost, delivery_fee=delivery_fee, discount=discount
        )
        assert money.customer_total(order) == Decimal(expected)


class TestSummarize:
    def test_empty_batch(self):
        totals = money.summarize([], RATE)
        assert totals.order_count == 0
        assert totals.balance == Decimal("0")

    def test_mixed_batch_nets_both_directions(self):
        cash = _order()
        transfer = _order(payment_method="TRANSFER", delivery_fee="20.00")

        totals = money.summarize([cash, transfer], RATE)

        assert totals.order_count == 2
        assert totals.total_sales == Decimal("260.00")
        assert totals.total_commission == Decimal("20.00")
        assert totals.total_delivery_fees == Decimal("20.00")
        assert totals.balance == Decimal("80.00")

    def test_rate_change_applies_to_later_computations(self):
        order = _order()
        assert money.commission(order, 150) == Decimal("15.00")
        assert money.summarize([order], 150).balance == Decimal("105.00")
