"""Referral and coupon repository interfaces."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.referrals.models import Coupon, Referral


class IReferralRepository(IRepository["Referral"]):
    @abstractmethod
    def get_for_order(self, order_id, lock: bool = False) -> Optional[Referral]:
        """The referral created by *order_id*, if any."""


class ICouponRepository(IRepository["Coupon"]):
    """Coupons are addressed by their code (the primary key)."""

    @abstractmethod
    def exists(self, code: str) -> bool:
        """Whether *code* is already taken."""
