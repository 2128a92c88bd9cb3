"""Affiliate URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.affiliates.views import AffiliateViewSet

router = DefaultRouter(trailing_slash=True)
router.register("affiliates", AffiliateViewSet, basename="affiliate")

urlpatterns = router.urls
