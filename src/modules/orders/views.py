"""Order API views.

Writes are dispatched on the command bus; reads use ``OrderService``.
Domain exceptions are translated into HTTP status codes by
``modules.core.api``; the view never swallows generic exceptions.
"""

from __future__ import annotations

from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.core.api import domain_error_response, run_command
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import (
    ConfirmTransferPaymentDTO,
    CreateOrderDTO,
    ReopenOrderDTO,
    SetOrderStatusDTO,
)
from modules.orders.exceptions import OrderNotFound
from modules.orders.filters import OrderFilter
from modules.orders.handlers import build_order_service
from modules.orders.models import Order
from modules.orders.serializers import (
    DashboardStatsSerializer,
    OrderBillSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.stats import DashboardService


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: every mutation goes through a
    command handled by ``OrderService``.
    """

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    search_fields = ["customer_name", "customer_phone", "affiliate_name"]
    ordering_fields = ["created_at", "total_cost", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def get_throttles(self) -> list[BaseThrottle]:
        """Pick the throttle scope for the current action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        return Order.objects.select_related("affiliate")

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        return run_command(
            CreateOrderDTO,
            request.data,
            OrderSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, affiliate, settled, date range) is handled by
        ``OrderFilter``.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = build_order_service().get_order(pk)
        except OrderNotFound as exc:
            return domain_error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["get"])
    def bill(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/bill/"""
        try:
            bill = build_order_service().get_bill(pk)
        except OrderNotFound as exc:
            return domain_error_response(exc)
        return Response(OrderBillSerializer(bill).data)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="confirm-payment")
    def confirm_payment(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm-payment/"""
        return run_command(ConfirmTransferPaymentDTO, {"order_id": pk}, OrderSerializer)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/status/ with ``{"new_status": "FINISHED"}``"""
        return run_command(
            SetOrderStatusDTO, {**request.data, "order_id": pk}, OrderSerializer
        )

    @action(detail=True, methods=["post"])
    def reopen(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/reopen/"""
        return run_command(
            ReopenOrderDTO, {**request.data, "order_id": pk}, OrderSerializer
        )


class DashboardView(APIView):
    """GET /api/v1/dashboard?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD"""

    def get(self, request: Request) -> Response:
        bounds = {}
        for param in ("start_date", "end_date"):
            raw = request.query_params.get(param)
            if not raw:
                continue
            parsed = parse_date(raw)
            if parsed is None:
                return Response(
                    {"detail": f"{param} must be YYYY-MM-DD."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            bounds[param] = parsed

        start = end = None
        tz = timezone.get_current_timezone()
        if "start_date" in bounds:
            start = datetime.combine(bounds["start_date"], time.min, tzinfo=tz)
        if "end_date" in bounds:
            end = datetime.combine(bounds["end_date"], time.max, tzinfo=tz)

        stats = DashboardService().get_stats(start=start, end=end)
        return Response(DashboardStatsSerializer(stats).data)
