"""Inventory change repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Set

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.inventory.models import InventoryChange  # noqa: F401


class IInventoryChangeRepository(IRepository["InventoryChange"]):
    """``get_for_update`` must be used before every status change so the
    workflow never acts on a stale status."""

    @abstractmethod
    def affiliates_with_pending_requests(self) -> Set[str]:
        """Ids of affiliates that have at least one PENDING request."""
