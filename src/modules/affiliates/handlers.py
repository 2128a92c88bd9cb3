"""Command handler wiring for the affiliates module."""

from __future__ import annotations

from modules.affiliates.repositories.django_repository import AffiliateDjangoRepository
from modules.affiliates.services import AffiliateService
from shared.infrastructure.bus import ServiceCommandHandler


def build_affiliate_service() -> AffiliateService:
    return AffiliateService(affiliate_repository=AffiliateDjangoRepository())


apply_affiliate_handler = ServiceCommandHandler(build_affiliate_service, "apply")
set_affiliate_status_handler = ServiceCommandHandler(
    build_affiliate_service, "set_status"
)
update_delivery_handler = ServiceCommandHandler(
    build_affiliate_service, "update_delivery"
)
update_schedule_handler = ServiceCommandHandler(
    build_affiliate_service, "update_schedule"
)
toggle_temporary_closure_handler = ServiceCommandHandler(
    build_affiliate_service, "toggle_temporary_closure"
)
update_bank_details_handler = ServiceCommandHandler(
    build_affiliate_service, "update_bank_details"
)
