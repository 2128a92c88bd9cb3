"""Inventory change API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.affiliates.exceptions import AffiliateNotFound
from modules.core.api import domain_error_response, run_command
from modules.inventory.constants import InventoryChangeStatus
from modules.inventory.dtos import (
    AdminAdjustInventoryDTO,
    CancelInventoryRequestDTO,
    ConfirmInventoryChangeDTO,
    RequestInventoryChangeDTO,
    ResolveInventoryChangeDTO,
)
from modules.inventory.handlers import build_inventory_service
from modules.inventory.models import InventoryChange
from modules.inventory.serializers import (
    AffiliateIndicatorsSerializer,
    InventoryChangeSerializer,
)


class InventoryChangeViewSet(GenericViewSet):
    queryset = InventoryChange.objects.all()

    def list(self, request: Request) -> Response:
        """GET /api/v1/inventory-changes/?affiliate=...&status=PENDING"""
        filters = {}
        affiliate_id = request.query_params.get("affiliate")
        if affiliate_id:
            filters["affiliate_id"] = affiliate_id
        status_value = request.query_params.get("status")
        if status_value in InventoryChangeStatus.values:
            filters["status"] = status_value
        changes = build_inventory_service().list_changes(filters)
        return Response(InventoryChangeSerializer(changes, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/inventory-changes/ (affiliate request)"""
        return run_command(
            RequestInventoryChangeDTO,
            request.data,
            InventoryChangeSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/inventory-changes/{pk}/ (withdraw a pending request)"""
        return run_command(
            CancelInventoryRequestDTO,
            {"change_id": pk},
            success_status=status.HTTP_204_NO_CONTENT,
        )

    @action(detail=False, methods=["post"])
    def adjust(self, request: Request) -> Response:
        """POST /api/v1/inventory-changes/adjust/ (admin, signed amount)"""
        return run_command(
            AdminAdjustInventoryDTO,
            request.data,
            InventoryChangeSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"])
    def resolve(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            ResolveInventoryChangeDTO,
            {**request.data, "change_id": pk},
            InventoryChangeSerializer,
        )

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            ConfirmInventoryChangeDTO, {"change_id": pk}, InventoryChangeSerializer
        )

    @action(detail=False, methods=["get"])
    def indicators(self, request: Request) -> Response:
        """GET /api/v1/inventory-changes/indicators/?affiliate=...

        Without ``affiliate`` returns every affiliate sorted by urgency.
        """
        service = build_inventory_service()
        affiliate_id = request.query_params.get("affiliate")
        if affiliate_id:
            try:
                row = service.indicators(affiliate_id)
            except AffiliateNotFound as exc:
                return domain_error_response(exc)
            return Response(AffiliateIndicatorsSerializer(row).data)
        rows = service.affiliates_by_urgency()
        return Response(AffiliateIndicatorsSerializer(rows, many=True).data)
