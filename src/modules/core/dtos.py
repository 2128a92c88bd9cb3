"""Platform settings DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import field_validator

from shared.domain.commands import Command


class UpdateSettingsDTO(Command):
    """Partial update of the tenant-wide settings row.

    ``None`` means "leave unchanged".
    """

    commission_rate_cents: Optional[int] = None
    tortilla_price: Optional[Decimal] = None
    reward_tortillas: Optional[int] = None
    admin_phone: Optional[str] = None
    bank_details: Optional[str] = None

    @field_validator("commission_rate_cents", "reward_tortillas")
    @classmethod
    def must_not_be_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Value must be zero or positive.")
        return v

    @field_validator("tortilla_price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v
