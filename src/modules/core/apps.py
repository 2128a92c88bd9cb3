from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.core"
    label = "core"

    def ready(self) -> None:
        from modules.core.dtos import UpdateSettingsDTO
        from modules.core.handlers import update_settings_handler
        from shared.infrastructure.bus import command_bus

        command_bus.register(UpdateSettingsDTO, update_settings_handler)
