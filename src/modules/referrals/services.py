"""Referral & coupon service layer (Use Cases).

Referrals are derived bookkeeping around orders:

- ``register_referral``: a new customer's first order quotes a referrer's
  code (status ``ACTIVE_ORDER``).
- ``cancel_for_order`` / ``restore_for_order``: follow the referee order
  when it is cancelled or reopened.
- ``complete_referral``: once the referee order is finished, mint exactly
  one coupon for the referrer.
- ``redeem_coupon``: validate and consume a coupon while an order is
  being created.  Consumption is never reverted.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.core.models import PlatformSettings
from modules.orders.constants import OrderStatus
from modules.referrals.constants import (
    COUPON_ALPHABET,
    COUPON_CODE_LENGTH,
    COUPON_CODE_MAX_RETRIES,
    COUPON_PREFIX,
    ReferralStatus,
)
from modules.referrals.events import ReferralCompleted, ReferralRegistered
from modules.referrals.exceptions import (
    CouponAlreadyUsed,
    CouponNotFound,
    InvalidCoupon,
    ReferralNotEligible,
    ReferralNotFound,
)
from modules.referrals.models import Coupon, Referral

if TYPE_CHECKING:
    from modules.customers.models import Customer
    from modules.orders.models import Order
    from modules.referrals.dtos import (
        CompleteReferralDTO,
        DeleteCouponDTO,
        ToggleCouponDTO,
    )
    from modules.referrals.repositories.interfaces import (
        ICouponRepository,
        IReferralRepository,
    )

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CouponRedemption:
    coupon: Coupon
    discount: Decimal


def generate_coupon_code() -> str:
    """``REGALO-XXXXXX`` with characters drawn from ``COUPON_ALPHABET``."""
    suffix = "".join(
        secrets.choice(COUPON_ALPHABET) for _ in range(COUPON_CODE_LENGTH)
    )
    return f"{COUPON_PREFIX}{suffix}"


class ReferralService:
    """Application service for referral and coupon use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        referral_repository: IReferralRepository,
        coupon_repository: ICouponRepository,
    ) -> None:
        self._referral_repo = referral_repository
        self._coupon_repo = coupon_repository

    # ------------------------------------------------------------------
    # Referral lifecycle
    # ------------------------------------------------------------------

    @transaction.atomic
    def register_referral(self, order: Order, referrer: Customer) -> Referral:
        referral = Referral(
            referrer=referrer,
            referrer_code=referrer.referral_code,
            referrer_name=referrer.name,
            referrer_phone=referrer.phone,
            order=order,
            referee_name=order.customer_name,
            referee_phone=order.customer_phone,
            quantity=order.quantity,
        )
        referral.add_domain_event(
            ReferralRegistered(
                aggregate_id=referral.id, referrer_code=referrer.referral_code
            )
        )
        referral = self._referral_repo.save(referral)
        logger.info(
            "referral.registered",
            referral_id=str(referral.id),
            order_id=str(order.id),
        )
        return referral

    @transaction.atomic
    def cancel_for_order(self, order: Order) -> Optional[Referral]:
        """Cancel the referral attached to *order*, if it is still open."""
        referral = self._referral_repo.get_for_order(order.id, lock=True)
        if referral is None or referral.status != ReferralStatus.ACTIVE_ORDER:
            return referral
        referral.status = ReferralStatus.CANCELLED
        self._referral_repo.save(referral)
        logger.info("referral.cancelled", referral_id=str(referral.id))
        return referral

    @transaction.atomic
    def restore_for_order(self, order: Order) -> Optional[Referral]:
        """Undo ``cancel_for_order`` after the order is reopened."""
        referral = self._referral_repo.get_for_order(order.id, lock=True)
        if referral is None or referral.status != ReferralStatus.CANCELLED:
            return referral
        referral.status = ReferralStatus.ACTIVE_ORDER
        self._referral_repo.save(referral)
        logger.info("referral.restored", referral_id=str(referral.id))
        return referral

    @transaction.atomic
    def complete_referral(self, dto: CompleteReferralDTO) -> Coupon:
        """Reward the referrer with a coupon.

        Raises:
            ReferralNotFound: unknown referral.
            ReferralNotEligible: the referral is not ``ACTIVE_ORDER`` or its
                order is not ``FINISHED``.
        """
        referral = self._referral_repo.get_for_update(str(dto.referral_id))
        if referral is None:
            raise ReferralNotFound(f"Referral {dto.referral_id} not found.")

        log = logger.bind(referral_id=str(referral.id), status=referral.status)
        if referral.status != ReferralStatus.ACTIVE_ORDER:
            log.warning("referral.not_active")
            raise ReferralNotEligible(
                f"Referral {referral.id} is {referral.status}, not ACTIVE_ORDER."
            )
        if referral.order.status != OrderStatus.FINISHED:
            log.warning(
                "referral.order_not_finished", order_status=referral.order.status
            )
            raise ReferralNotEligible(
                f"Order {referral.order_id} is {referral.order.status}, not FINISHED."
            )

        settings_row = PlatformSettings.load()
        reward = (settings_row.tortilla_price * settings_row.reward_tortillas).quantize(
            Decimal("0.01")
        )
        coupon = Coupon(
            id=self._unique_code(),
            referral=referral,
            generated_for_phone=referral.referrer_phone,
            reward_amount=reward,
        )
        self._coupon_repo.save(coupon)

        referral.status = ReferralStatus.COMPLETED
        referral.add_domain_event(
            ReferralCompleted(
                aggregate_id=referral.id,
                coupon_code=coupon.id,
                reward_amount=str(reward),
            )
        )
        self._referral_repo.save(referral)
        log.info("referral.completed", coupon_code=coupon.id, reward=str(reward))
        return coupon

    # ------------------------------------------------------------------
    # Coupons
    # ------------------------------------------------------------------

    @transaction.atomic
    def redeem_coupon(
        self, code: str, phone: str, subtotal: Decimal
    ) -> CouponRedemption:
        """Validate *code* for *phone* and mark it used.

        The discount never exceeds *subtotal*.

        Raises:
            InvalidCoupon: unknown, inactive, used, or bound to another phone.
        """
        normalized = code.strip().upper()
        coupon = self._coupon_repo.get_for_update(normalized)
        if coupon is None:
            raise InvalidCoupon(f"Coupon {normalized} does not exist.")
        if not coupon.is_active:
            raise InvalidCoupon(f"Coupon {normalized} is not active.")
        if coupon.is_used:
            raise InvalidCoupon(f"Coupon {normalized} was already used.")
        if coupon.generated_for_phone and coupon.generated_for_phone != phone:
            raise InvalidCoupon(f"Coupon {normalized} belongs to another customer.")

        coupon.is_used = True
        self._coupon_repo.save(coupon)
        discount = min(coupon.reward_amount, subtotal)
        logger.info("coupon.redeemed", coupon_code=coupon.id, discount=str(discount))
        return CouponRedemption(coupon=coupon, discount=discount)

    @transaction.atomic
    def toggle_coupon(self, dto: ToggleCouponDTO) -> Coupon:
        coupon = self._coupon_repo.get_for_update(dto.code)
        if coupon is None:
            raise CouponNotFound(f"Coupon {dto.code} not found.")
        if coupon.is_used:
            raise CouponAlreadyUsed(f"Coupon {dto.code} was already used.")
        coupon.is_active = not coupon.is_active
        self._coupon_repo.save(coupon)
        logger.info(
            "coupon.toggled", coupon_code=coupon.id, is_active=coupon.is_active
        )
        return coupon

    @transaction.atomic
    def delete_coupon(self, dto: DeleteCouponDTO) -> None:
        if not self._coupon_repo.delete(dto.code):
            raise CouponNotFound(f"Coupon {dto.code} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_referrals(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[Referral]:
        return self._referral_repo.list(filters)

    def eligible_referrals(self) -> List[Referral]:
        """Active referrals whose order is finished (ready to complete)."""
        return self._referral_repo.list(
            {
                "status": ReferralStatus.ACTIVE_ORDER,
                "order__status": OrderStatus.FINISHED,
            }
        )

    def list_coupons(self, filters: Optional[Dict[str, Any]] = None) -> List[Coupon]:
        return self._coupon_repo.list(filters)

    def _unique_code(self) -> str:
        for _ in range(COUPON_CODE_MAX_RETRIES):
            candidate = generate_coupon_code()
            if not self._coupon_repo.exists(candidate):
                return candidate
        raise RuntimeError(
            f"Failed to generate a unique coupon code after "
            f"{COUPON_CODE_MAX_RETRIES} attempts"
        )
