"""Cash-out repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, List, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.settlements.models import CashOut


class ICashOutRepository(IRepository["CashOut"]):
    """Cash-outs are never deleted once created; ``delete`` exists for the
    generic contract only."""

    @abstractmethod
    def mark_orders_settled(self, cash_out: CashOut, orders: List) -> int:
        """Point every order in *orders* at *cash_out*; returns the count."""

    @abstractmethod
    def settlement_pointers(self) -> Dict[str, Tuple[str, str]]:
        """``order_id -> (cash_out_id, status)`` for every settled order."""

    @abstractmethod
    def order_states(self, order_ids: List[str]) -> Dict[str, Tuple[str, str]]:
        """``order_id -> (status, settled_in_cash_out_id or "")``."""

    @abstractmethod
    def set_order_pointer(self, order_id: str, cash_out_id) -> int:
        """Write (or clear, with ``None``) one order's settlement pointer."""
