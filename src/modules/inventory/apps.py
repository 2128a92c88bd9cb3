from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.inventory"
    label = "inventory"

    def ready(self) -> None:
        from modules.inventory import dtos, handlers
        from modules.inventory.events import InventoryChangeCompleted
        from shared.infrastructure.bus import command_bus, event_bus

        command_bus.register(
            dtos.RequestInventoryChangeDTO, handlers.request_change_handler
        )
        command_bus.register(
            dtos.AdminAdjustInventoryDTO, handlers.admin_adjust_handler
        )
        command_bus.register(
            dtos.ResolveInventoryChangeDTO, handlers.resolve_change_handler
        )
        command_bus.register(
            dtos.ConfirmInventoryChangeDTO, handlers.confirm_change_handler
        )
        command_bus.register(
            dtos.CancelInventoryRequestDTO, handlers.cancel_request_handler
        )
        event_bus.subscribe(
            InventoryChangeCompleted, handlers.inventory_change_completed_handler
        )
