from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders import dtos, handlers
        from modules.orders.events import (
            OrderCancelled,
            OrderCreated,
            OrderStatusChanged,
        )
        from shared.infrastructure.bus import command_bus, event_bus

        command_bus.register(dtos.CreateOrderDTO, handlers.create_order_handler)
        command_bus.register(
            dtos.ConfirmTransferPaymentDTO, handlers.confirm_transfer_payment_handler
        )
        command_bus.register(dtos.SetOrderStatusDTO, handlers.set_order_status_handler)
        command_bus.register(dtos.ReopenOrderDTO, handlers.reopen_order_handler)

        event_bus.subscribe(OrderCreated, handlers.order_created_handler)
        event_bus.subscribe(OrderCancelled, handlers.order_cancelled_handler)
        event_bus.subscribe(OrderStatusChanged, handlers.order_status_changed_handler)
