"""Command and event handlers for referrals."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderFinished
from modules.referrals.constants import ReferralStatus
from modules.referrals.repositories.django_repository import (
    CouponDjangoRepository,
    ReferralDjangoRepository,
)
from modules.referrals.services import ReferralService
from shared.domain.bus import IEventHandler
from shared.infrastructure.bus import ServiceCommandHandler

logger = structlog.get_logger(__name__)


def build_referral_service() -> ReferralService:
    return ReferralService(
        referral_repository=ReferralDjangoRepository(),
        coupon_repository=CouponDjangoRepository(),
    )


class ReferralEligibilityHandler(IEventHandler[OrderFinished]):
    """Flags the referral of a finished order as ready to complete."""

    def handle(self, event: OrderFinished) -> None:
        if not event.referral_code_used:
            return
        referral = ReferralDjangoRepository().get_for_order(event.aggregate_id)
        if referral is None or referral.status != ReferralStatus.ACTIVE_ORDER:
            return
        logger.info(
            "referral.eligible",
            referral_id=str(referral.id),
            order_id=str(event.aggregate_id),
            referrer_code=referral.referrer_code,
        )


complete_referral_handler = ServiceCommandHandler(
    build_referral_service, "complete_referral"
)
toggle_coupon_handler = ServiceCommandHandler(build_referral_service, "toggle_coupon")
delete_coupon_handler = ServiceCommandHandler(build_referral_service, "delete_coupon")
referral_eligibility_handler = ReferralEligibilityHandler()
