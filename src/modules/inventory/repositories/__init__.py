"""Inventory change repositories package."""

from modules.inventory.repositories.django_repository import (
    InventoryChangeDjangoRepository,
)
from modules.inventory.repositories.interfaces import IInventoryChangeRepository

__all__ = ["IInventoryChangeRepository", "InventoryChangeDjangoRepository"]
