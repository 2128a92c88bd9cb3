"""Affiliate API views.

Writes are dispatched as commands on the command bus; reads go through
``AffiliateService``.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.affiliates.dtos import (
    ApplyAffiliateDTO,
    SetAffiliateStatusDTO,
    ToggleTemporaryClosureDTO,
    UpdateBankDetailsDTO,
    UpdateDeliveryDTO,
    UpdateScheduleDTO,
)
from modules.affiliates.exceptions import AffiliateNotFound
from modules.affiliates.handlers import build_affiliate_service
from modules.affiliates.models import Affiliate
from modules.affiliates.serializers import AffiliateListSerializer, AffiliateSerializer
from modules.core.api import domain_error_response, run_command
from modules.core.pagination import StandardResultsSetPagination


class AffiliateViewSet(GenericViewSet):
    queryset = Affiliate.objects.all()
    lookup_value_regex = r"[0-9]+"

    def list(self, request: Request) -> Response:
        """GET /api/v1/affiliates/?status=APPROVED"""
        filters = {}
        status_value = request.query_params.get("status")
        if status_value:
            filters["status"] = status_value.upper()
        affiliates = build_affiliate_service().list_affiliates(filters)

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(affiliates, request)
        serializer = AffiliateListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            affiliate = build_affiliate_service().get_affiliate(pk)
        except AffiliateNotFound as exc:
            return domain_error_response(exc)
        return Response(AffiliateSerializer(affiliate).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/affiliates/ (vendor application)"""
        return run_command(
            ApplyAffiliateDTO,
            request.data,
            AffiliateSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            SetAffiliateStatusDTO,
            {**request.data, "affiliate_id": pk},
            AffiliateSerializer,
        )

    @action(detail=True, methods=["patch"])
    def delivery(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            UpdateDeliveryDTO, {**request.data, "affiliate_id": pk}, AffiliateSerializer
        )

    @action(detail=True, methods=["put"])
    def schedule(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            UpdateScheduleDTO,
            {"schedule": request.data, "affiliate_id": pk},
            AffiliateSerializer,
        )

    @action(detail=True, methods=["post"], url_path="toggle-closure")
    def toggle_closure(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            ToggleTemporaryClosureDTO, {"affiliate_id": pk}, AffiliateSerializer
        )

    @action(detail=True, methods=["patch"], url_path="bank-details")
    def bank_details(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            UpdateBankDetailsDTO,
            {**request.data, "affiliate_id": pk},
            AffiliateSerializer,
        )
