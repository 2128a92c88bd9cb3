"""Domain events for referrals and coupons."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class ReferralRegistered(DomainEvent):
    referrer_code: str = ""


@dataclass(frozen=True)
class ReferralCompleted(DomainEvent):
    """Raised when a referral is rewarded with a coupon."""

    coupon_code: str = ""
    reward_amount: str = ""
