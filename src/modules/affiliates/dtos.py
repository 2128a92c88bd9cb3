"""Affiliate command DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.affiliates.constants import WEEKDAYS, AffiliateStatus
from shared.domain.commands import Command

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


class ApplyAffiliateDTO(Command):
    """A vendor applies to join; the account starts ``PENDING``."""

    name: str
    phone: str
    address: str = ""
    has_delivery_service: bool = False
    delivery_cost: Decimal = Decimal("0.00")
    bank_details: str = ""

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required.")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def phone_must_have_digits(cls, v: str) -> str:
        digits = _digits(v)
        if not digits:
            raise ValueError("Phone number must contain digits.")
        return digits

    @field_validator("delivery_cost")
    @classmethod
    def cost_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Delivery cost cannot be negative.")
        return v


class SetAffiliateStatusDTO(Command):
    affiliate_id: str
    status: AffiliateStatus


class UpdateDeliveryDTO(Command):
    affiliate_id: str
    has_delivery_service: bool
    delivery_cost: Decimal
    address: Optional[str] = None

    @field_validator("delivery_cost")
    @classmethod
    def cost_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Delivery cost cannot be negative.")
        return v


class DayScheduleDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_open: bool = False
    open_time: str = "09:00"
    close_time: str = "18:00"

    @field_validator("open_time", "close_time")
    @classmethod
    def must_be_hhmm(cls, v: str) -> str:
        if not _HHMM.match(v):
            raise ValueError("Time must use the HH:MM 24-hour format.")
        return v

    @model_validator(mode="after")
    def open_before_close(self):
        if self.is_open and self.open_time > self.close_time:
            raise ValueError("Opening time must not be after closing time.")
        return self


class UpdateScheduleDTO(Command):
    affiliate_id: str
    schedule: Dict[str, DayScheduleDTO]

    @field_validator("schedule")
    @classmethod
    def known_weekdays(cls, v: Dict[str, DayScheduleDTO]) -> Dict[str, DayScheduleDTO]:
        unknown = set(v) - set(WEEKDAYS)
        if unknown:
            raise ValueError(f"Unknown weekdays: {', '.join(sorted(unknown))}.")
        return v


class ToggleTemporaryClosureDTO(Command):
    affiliate_id: str


class UpdateBankDetailsDTO(Command):
    affiliate_id: str
    bank_details: str
