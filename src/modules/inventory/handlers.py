"""Command and event handlers for the inventory change workflow."""

from __future__ import annotations

import structlog

from modules.affiliates.repositories.django_repository import AffiliateDjangoRepository
from modules.inventory.events import InventoryChangeCompleted
from modules.inventory.repositories.django_repository import (
    InventoryChangeDjangoRepository,
)
from modules.inventory.services import InventoryService
from modules.orders.repositories.django_repository import OrderDjangoRepository
from shared.domain.bus import IEventHandler
from shared.infrastructure.bus import ServiceCommandHandler

logger = structlog.get_logger(__name__)


def build_inventory_service() -> InventoryService:
    return InventoryService(
        change_repository=InventoryChangeDjangoRepository(),
        affiliate_repository=AffiliateDjangoRepository(),
        order_repository=OrderDjangoRepository(),
    )


class InventoryChangeCompletedHandler(IEventHandler[InventoryChangeCompleted]):
    def handle(self, event: InventoryChangeCompleted) -> None:
        log = logger.bind(
            change_id=str(event.aggregate_id), affiliate_id=event.affiliate_id
        )
        if event.new_inventory < 0:
            log.warning("inventory.still_negative", inventory=event.new_inventory)
        else:
            log.info("inventory.event.completed", inventory=event.new_inventory)


request_change_handler = ServiceCommandHandler(
    build_inventory_service, "request_change"
)
admin_adjust_handler = ServiceCommandHandler(build_inventory_service, "admin_adjust")
resolve_change_handler = ServiceCommandHandler(
    build_inventory_service, "resolve_change"
)
confirm_change_handler = ServiceCommandHandler(
    build_inventory_service, "confirm_change"
)
cancel_request_handler = ServiceCommandHandler(
    build_inventory_service, "cancel_request"
)
inventory_change_completed_handler = InventoryChangeCompletedHandler()
