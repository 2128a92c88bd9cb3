"""Referral and coupon command DTOs."""

from __future__ import annotations

from uuid import UUID

from pydantic import field_validator

from shared.domain.commands import Command


class CompleteReferralDTO(Command):
    referral_id: UUID


class _CouponCommand(Command):
    code: str

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Coupon code is required.")
        return v.strip().upper()


class ToggleCouponDTO(_CouponCommand):
    pass


class DeleteCouponDTO(_CouponCommand):
    pass
