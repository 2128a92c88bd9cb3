"""Affiliate DRF serializers (output only; input goes through command DTOs)."""

from __future__ import annotations

from rest_framework import serializers

from modules.affiliates.models import Affiliate


class AffiliateSerializer(serializers.ModelSerializer):
    is_open = serializers.SerializerMethodField()

    class Meta:
        model = Affiliate
        fields = [
            "id",
            "name",
            "phone",
            "address",
            "status",
            "inventory",
            "has_delivery_service",
            "delivery_cost",
            "schedule",
            "is_temporarily_closed",
            "is_open",
            "bank_details",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_open(self, obj: Affiliate) -> bool:
        return obj.is_open()


class AffiliateListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the affiliate directory."""

    class Meta:
        model = Affiliate
        fields = [
            "id",
            "name",
            "status",
            "inventory",
            "has_delivery_service",
            "delivery_cost",
            "is_temporarily_closed",
        ]
        read_only_fields = fields
