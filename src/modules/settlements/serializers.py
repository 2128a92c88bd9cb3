"""Settlement DRF serializers (output only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.settlements.models import CashOut


class CashOutSerializer(serializers.ModelSerializer):
    class Meta:
        model = CashOut
        fields = [
            "id",
            "affiliate",
            "affiliate_name",
            "orders_covered_ids",
            "total_sales",
            "total_commission",
            "total_delivery_fees",
            "balance",
            "commission_rate_cents",
            "status",
            "proof_of_payment",
            "start_date",
            "end_date",
            "confirmed_at",
            "created_at",
        ]
        read_only_fields = fields


class SettlementPreviewSerializer(serializers.Serializer):
    affiliate_id = serializers.CharField()
    order_ids = serializers.ListField(child=serializers.UUIDField())
    order_count = serializers.IntegerField()
    total_sales = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_commission = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_delivery_fees = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    commission_rate_cents = serializers.IntegerField()
    requires_proof_of_payment = serializers.BooleanField()
    start_date = serializers.DateTimeField(allow_null=True)
    end_date = serializers.DateTimeField(allow_null=True)
