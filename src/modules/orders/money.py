"""Money model: pure functions over an order's frozen amounts.

Every function reads only the fields fixed at order creation
(``quantity``, ``total_cost``, ``delivery_fee_applied``,
``discount_applied``, ``payment_method``) plus the commission rate passed
in by the caller.  Nothing here touches the database.

Sign convention for balances: positive means the affiliate owes the
admin, negative means the admin owes the affiliate.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

from modules.orders.constants import PaymentMethod

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")


class PricedOrder(Protocol):
    quantity: int
    total_cost: Decimal
    delivery_fee_applied: Decimal
    discount_applied: Decimal
    payment_method: str


def commission(order: PricedOrder, commission_rate_cents: int) -> Decimal:
    """``quantity × rate / 100`` (rate is in cents per tortilla)."""
    return (Decimal(order.quantity * commission_rate_cents) / 100).quantize(CENTS)


def customer_total(order: PricedOrder) -> Decimal:
    return order.total_cost + order.delivery_fee_applied - order.discount_applied


def amount_affiliate_owes_admin(
    order: PricedOrder, commission_rate_cents: int
) -> Decimal:
    """Cash orders: the affiliate keeps its commission and the delivery fee."""
    if order.payment_method != PaymentMethod.CASH:
        return ZERO
    return (order.total_cost - order.discount_applied) - commission(
        order, commission_rate_cents
    )


def amount_admin_owes_affiliate(
    order: PricedOrder, commission_rate_cents: int
) -> Decimal:
    """Transfer orders: the admin collected everything and pays back
    commission plus delivery fee."""
    if order.payment_method != PaymentMethod.TRANSFER:
        return ZERO
    return commission(order, commission_rate_cents) + order.delivery_fee_applied


def balance_contribution(order: PricedOrder, commission_rate_cents: int) -> Decimal:
    if order.payment_method == PaymentMethod.CASH:
        return amount_affiliate_owes_admin(order, commission_rate_cents)
    return -amount_admin_owes_affiliate(order, commission_rate_cents)


@dataclass(frozen=True)
class SettlementTotals:
    order_count: int
    total_sales: Decimal
    total_commission: Decimal
    total_delivery_fees: Decimal
    balance: Decimal


def summarize(
    orders: Iterable[PricedOrder], commission_rate_cents: int
) -> SettlementTotals:
    """Aggregate sales, commission, delivery fees and the net balance."""
    count = 0
    sales = commission_sum = fees = balance = ZERO
    for order in orders:
        count += 1
        sales += customer_total(order)
        commission_sum += commission(order, commission_rate_cents)
        fees += order.delivery_fee_applied
        balance += balance_contribution(order, commission_rate_cents)
    return SettlementTotals(
        order_count=count,
        total_sales=sales,
        total_commission=commission_sum,
        total_delivery_fees=fees,
        balance=balance,
    )
