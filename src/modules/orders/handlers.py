"""Command and event handlers for the Orders module."""

from __future__ import annotations

import structlog

from modules.affiliates.repositories.django_repository import AffiliateDjangoRepository
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.referrals.handlers import build_referral_service
from shared.domain.bus import IEventHandler
from shared.infrastructure.bus import ServiceCommandHandler

logger = structlog.get_logger(__name__)


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        affiliate_repository=AffiliateDjangoRepository(),
        customer_service=CustomerService(CustomerDjangoRepository()),
        referral_service=build_referral_service(),
    )


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            affiliate_id=event.affiliate_id,
            payment_method=event.payment_method,
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            affiliate_id=event.affiliate_id,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


create_order_handler = ServiceCommandHandler(build_order_service, "create_order")
confirm_transfer_payment_handler = ServiceCommandHandler(
    build_order_service, "confirm_transfer_payment"
)
set_order_status_handler = ServiceCommandHandler(build_order_service, "set_status")
reopen_order_handler = ServiceCommandHandler(build_order_service, "reopen_order")

order_created_handler = OrderCreatedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()
