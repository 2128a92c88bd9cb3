"""Inventory DRF serializers (output only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.inventory.models import InventoryChange


class InventoryChangeSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryChange
        fields = [
            "id",
            "affiliate",
            "affiliate_name",
            "amount",
            "status",
            "requested_by_admin",
            "resolved_at",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields


class AffiliateIndicatorsSerializer(serializers.Serializer):
    affiliate_id = serializers.CharField()
    name = serializers.CharField()
    status = serializers.CharField()
    inventory = serializers.IntegerField()
    is_urgent = serializers.BooleanField()
    has_pending_request = serializers.BooleanField()
