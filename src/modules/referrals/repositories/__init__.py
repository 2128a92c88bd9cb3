"""Referral and coupon repositories package."""

from modules.referrals.repositories.django_repository import (
    CouponDjangoRepository,
    ReferralDjangoRepository,
)
from modules.referrals.repositories.interfaces import (
    ICouponRepository,
    IReferralRepository,
)

__all__ = [
    "ICouponRepository",
    "IReferralRepository",
    "CouponDjangoRepository",
    "ReferralDjangoRepository",
]
