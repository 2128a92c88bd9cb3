"""Referral and coupon DRF serializers (output only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.referrals.models import Coupon, Referral


class ReferralSerializer(serializers.ModelSerializer):
    order_status = serializers.CharField(source="order.status", read_only=True)

    class Meta:
        model = Referral
        fields = [
            "id",
            "referrer_code",
            "referrer_name",
            "referrer_phone",
            "order",
            "order_status",
            "referee_name",
            "referee_phone",
            "quantity",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class CouponSerializer(serializers.ModelSerializer):
    code = serializers.CharField(source="id", read_only=True)

    class Meta:
        model = Coupon
        fields = [
            "code",
            "referral",
            "generated_for_phone",
            "reward_amount",
            "is_used",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields
