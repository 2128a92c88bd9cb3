from django.apps import AppConfig


class AffiliatesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.affiliates"
    label = "affiliates"

    def ready(self) -> None:
        from modules.affiliates import dtos, handlers
        from shared.infrastructure.bus import command_bus

        command_bus.register(dtos.ApplyAffiliateDTO, handlers.apply_affiliate_handler)
        command_bus.register(
            dtos.SetAffiliateStatusDTO, handlers.set_affiliate_status_handler
        )
        command_bus.register(dtos.UpdateDeliveryDTO, handlers.update_delivery_handler)
        command_bus.register(dtos.UpdateScheduleDTO, handlers.update_schedule_handler)
        command_bus.register(
            dtos.ToggleTemporaryClosureDTO, handlers.toggle_temporary_closure_handler
        )
        command_bus.register(
            dtos.UpdateBankDetailsDTO, handlers.update_bank_details_handler
        )
