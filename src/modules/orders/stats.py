"""Admin dashboard statistics.

Order-based figures honour the optional ``[start, end]`` window on
``created_at``; affiliate and inventory counts are always current.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.db.models import DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import Coalesce

from modules.affiliates.constants import AffiliateStatus
from modules.affiliates.models import Affiliate
from modules.inventory.constants import InventoryChangeStatus
from modules.inventory.models import InventoryChange
from modules.orders.constants import OrderStatus
from modules.orders.models import Order

_MONEY_OUTPUT = DecimalField(max_digits=14, decimal_places=2)


@dataclass(frozen=True)
class DashboardStats:
    total_orders: int
    total_affiliates: int
    pending_affiliates: int
    pending_transfers: int
    pending_inventory_requests: int
    total_sales: Decimal
    tortillas_sold: int
    urgent_affiliates: int


class DashboardService:
    def get_stats(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> DashboardStats:
        orders = Order.objects.all()
        if start is not None:
            orders = orders.filter(created_at__gte=start)
        if end is not None:
            orders = orders.filter(created_at__lte=end)

        finished = orders.filter(status=OrderStatus.FINISHED).aggregate(
            sales=Coalesce(
                Sum(
                    ExpressionWrapper(
                        F("total_cost")
                        + F("delivery_fee_applied")
                        - F("discount_applied"),
                        output_field=_MONEY_OUTPUT,
                    )
                ),
                Decimal("0.00"),
                output_field=_MONEY_OUTPUT,
            ),
            tortillas=Coalesce(Sum("quantity"), 0),
        )

        urgent = (
            Order.objects.filter(
                status=OrderStatus.ACTIVE, is_low_inventory_order=True
            )
            .values("affiliate_id")
            .distinct()
            .count()
        )

        return DashboardStats(
            total_orders=orders.count(),
            total_affiliates=Affiliate.objects.count(),
            pending_affiliates=Affiliate.objects.filter(
                status=AffiliateStatus.PENDING
            ).count(),
            pending_transfers=orders.filter(
                status=OrderStatus.PENDING_CONFIRMATION
            ).count(),
            pending_inventory_requests=InventoryChange.objects.filter(
                status=InventoryChangeStatus.PENDING
            ).count(),
            total_sales=Decimal(str(finished["sales"])).quantize(Decimal("0.01")),
            tortillas_sold=finished["tortillas"],
            urgent_affiliates=urgent,
        )
