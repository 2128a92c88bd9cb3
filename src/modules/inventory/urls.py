"""Inventory URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.inventory.views import InventoryChangeViewSet

router = DefaultRouter(trailing_slash=True)
router.register(
    "inventory-changes", InventoryChangeViewSet, basename="inventory-change"
)

urlpatterns = router.urls
