"""Inventory change command DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from uuid import UUID

from pydantic import field_validator

from modules.inventory.constants import RESOLUTIONS, InventoryChangeStatus
from shared.domain.commands import Command


class RequestInventoryChangeDTO(Command):
    """An affiliate asks for more tortillas (amount > 0)."""

    affiliate_id: str
    amount: int

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Requested amount must be greater than zero.")
        return v


class AdminAdjustInventoryDTO(Command):
    """Admin adds (positive) or removes (negative) stock."""

    affiliate_id: str
    amount: int

    @field_validator("amount")
    @classmethod
    def amount_must_not_be_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Adjustment amount cannot be zero.")
        return v


class ResolveInventoryChangeDTO(Command):
    change_id: UUID
    decision: InventoryChangeStatus

    @field_validator("decision")
    @classmethod
    def must_be_a_resolution(cls, v: InventoryChangeStatus) -> InventoryChangeStatus:
        if v not in RESOLUTIONS:
            raise ValueError("Decision must be APPROVED or REJECTED.")
        return v


class ConfirmInventoryChangeDTO(Command):
    change_id: UUID


class CancelInventoryRequestDTO(Command):
    change_id: UUID
