import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    affiliate = django_filters.CharFilter(field_name="affiliate_id")
    phone = django_filters.CharFilter(field_name="customer_phone")
    payment_method = django_filters.CharFilter(
        field_name="payment_method", lookup_expr="iexact"
    )
    settled = django_filters.BooleanFilter(
        field_name="settled_in_cash_out", lookup_expr="isnull", exclude=True
    )
    low_inventory = django_filters.BooleanFilter(field_name="is_low_inventory_order")
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )

    class Meta:
        model = Order
        fields = [
            "status",
            "affiliate",
            "phone",
            "payment_method",
            "settled",
            "low_inventory",
            "start_date",
            "end_date",
        ]
