"""Settlement URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.settlements.views import CashOutViewSet

router = DefaultRouter(trailing_slash=True)
router.register("cash-outs", CashOutViewSet, basename="cash-out")

urlpatterns = router.urls
