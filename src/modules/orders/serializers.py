"""Order DRF serializers (output only).

Input is validated by the command DTOs in ``dtos.py``; business logic
lives in the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderStatusHistory


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with status history."""

    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_name",
            "customer_phone",
            "customer_address",
            "affiliate",
            "affiliate_name",
            "quantity",
            "unit_price",
            "total_cost",
            "payment_method",
            "wants_delivery",
            "delivery_fee_applied",
            "discount_applied",
            "status",
            "coupon_used",
            "referral_code_used",
            "settled_in_cash_out",
            "is_low_inventory_order",
            "status_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order listings."""

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_name",
            "affiliate",
            "affiliate_name",
            "quantity",
            "total_cost",
            "payment_method",
            "status",
            "settled_in_cash_out",
            "is_low_inventory_order",
            "created_at",
        ]
        read_only_fields = fields


class OrderBillSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = serializers.DecimalField(max_digits=10, decimal_places=2)
    discount = serializers.DecimalField(max_digits=10, decimal_places=2)
    customer_total = serializers.DecimalField(max_digits=10, decimal_places=2)
    payment_method = serializers.CharField()
    commission_rate_cents = serializers.IntegerField()
    commission = serializers.DecimalField(max_digits=10, decimal_places=2)
    amount_affiliate_owes_admin = serializers.DecimalField(
        max_digits=10, decimal_places=2
    )
    amount_admin_owes_affiliate = serializers.DecimalField(
        max_digits=10, decimal_places=2
    )
    balance_contribution = serializers.DecimalField(max_digits=10, decimal_places=2)


class DashboardStatsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_affiliates = serializers.IntegerField()
    pending_affiliates = serializers.IntegerField()
    pending_transfers = serializers.IntegerField()
    pending_inventory_requests = serializers.IntegerField()
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    tortillas_sold = serializers.IntegerField()
    urgent_affiliates = serializers.IntegerField()
