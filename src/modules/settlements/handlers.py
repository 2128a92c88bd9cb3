"""Command and event handlers for the settlement engine."""

from __future__ import annotations

import structlog

from modules.affiliates.repositories.django_repository import AffiliateDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.settlements.events import CashOutPerformed
from modules.settlements.repositories.django_repository import CashOutDjangoRepository
from modules.settlements.services import SettlementService
from shared.domain.bus import IEventHandler
from shared.infrastructure.bus import ServiceCommandHandler

logger = structlog.get_logger(__name__)


def build_settlement_service() -> SettlementService:
    return SettlementService(
        cash_out_repository=CashOutDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        affiliate_repository=AffiliateDjangoRepository(),
    )


class CashOutPerformedHandler(IEventHandler[CashOutPerformed]):
    def handle(self, event: CashOutPerformed) -> None:
        logger.info(
            "cashout.event.performed",
            cash_out_id=str(event.aggregate_id),
            affiliate_id=event.affiliate_id,
            balance=event.balance,
            status=event.status,
        )


perform_cash_out_handler = ServiceCommandHandler(
    build_settlement_service, "perform_cash_out"
)
confirm_cash_out_handler = ServiceCommandHandler(
    build_settlement_service, "confirm_cash_out"
)
cash_out_performed_handler = CashOutPerformedHandler()
