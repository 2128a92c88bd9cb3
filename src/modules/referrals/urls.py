"""Referral URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.referrals.views import CouponViewSet, ReferralViewSet

router = DefaultRouter(trailing_slash=True)
router.register("referrals", ReferralViewSet, basename="referral")
router.register("coupons", CouponViewSet, basename="coupon")

urlpatterns = router.urls
