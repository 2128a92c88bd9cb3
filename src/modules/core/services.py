"""Platform settings service."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.core.models import PlatformSettings

if TYPE_CHECKING:
    from modules.core.dtos import UpdateSettingsDTO

logger = structlog.get_logger(__name__)

_SETTINGS_FIELDS = (
    "commission_rate_cents",
    "tortilla_price",
    "reward_tortillas",
    "admin_phone",
    "bank_details",
)


class PlatformSettingsService:
    def get_settings(self) -> PlatformSettings:
        return PlatformSettings.load()

    @transaction.atomic
    def update_settings(self, dto: UpdateSettingsDTO) -> PlatformSettings:
        """Apply the non-null fields of *dto*.

        Existing orders and coupons keep their frozen amounts; only
        computations performed afterwards see the new values.
        """
        settings_row = PlatformSettings.load()
        changed = []
        for field in _SETTINGS_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(settings_row, field, value)
                changed.append(field)
        if changed:
            settings_row.save(update_fields=changed)
        logger.info("settings.updated", fields=changed)
        return settings_row
