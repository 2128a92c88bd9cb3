"""Command handler wiring for the core module."""

from __future__ import annotations

from modules.core.services import PlatformSettingsService
from shared.infrastructure.bus import ServiceCommandHandler

update_settings_handler = ServiceCommandHandler(
    PlatformSettingsService, "update_settings"
)
