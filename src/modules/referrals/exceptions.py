"""Referral and coupon domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import (
    EntityNotFound,
    InvalidTransition,
    PreconditionFailed,
)


class ReferralNotFound(EntityNotFound):
    """The requested referral does not exist."""


class ReferralNotEligible(InvalidTransition):
    """The referral is not active or its order is not finished yet."""


class CouponNotFound(EntityNotFound):
    """The requested coupon does not exist."""


class CouponAlreadyUsed(InvalidTransition):
    """A used coupon can no longer be toggled."""


class InvalidCoupon(PreconditionFailed):
    """The coupon cannot be applied to this order."""
