"""Order repository interface.

Extends ``IRepository[Order]`` with the queries the order lifecycle,
the settlement engine and the inventory workflow rely on.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def add_history(
        self,
        order_id,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def exists_for_phone(self, phone: str) -> bool:
        """Whether any order was ever placed from *phone*."""

    @abstractmethod
    def unsettled_for_affiliate(
        self, affiliate_id: str, lock: bool = False
    ) -> List[Order]:
        """Finished orders of *affiliate_id* not yet covered by a cash-out.

        Ordered by ``(created_at, id)``.  With ``lock=True`` the rows are
        selected FOR UPDATE.
        """

    @abstractmethod
    def active_low_inventory_for_affiliate(
        self, affiliate_id: str, lock: bool = False
    ) -> List[Order]:
        """Active orders of *affiliate_id* flagged as exceeding stock."""
