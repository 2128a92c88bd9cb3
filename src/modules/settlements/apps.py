from django.apps import AppConfig


class SettlementsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.settlements"
    label = "settlements"

    def ready(self) -> None:
        from modules.settlements import dtos, handlers
        from modules.settlements.events import CashOutPerformed
        from shared.infrastructure.bus import command_bus, event_bus

        command_bus.register(dtos.PerformCashOutDTO, handlers.perform_cash_out_handler)
        command_bus.register(dtos.ConfirmCashOutDTO, handlers.confirm_cash_out_handler)
        event_bus.subscribe(CashOutPerformed, handlers.cash_out_performed_handler)
