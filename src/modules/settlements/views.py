"""Settlement API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.api import domain_error_response, run_command
from modules.settlements.dtos import ConfirmCashOutDTO, PerformCashOutDTO
from modules.settlements.handlers import build_settlement_service
from modules.settlements.models import CashOut
from modules.settlements.serializers import (
    CashOutSerializer,
    SettlementPreviewSerializer,
)
from shared.domain.exceptions import DomainError


class CashOutViewSet(GenericViewSet):
    queryset = CashOut.objects.all()

    def list(self, request: Request) -> Response:
        """GET /api/v1/cash-outs/?affiliate=..."""
        filters = {}
        affiliate_id = request.query_params.get("affiliate")
        if affiliate_id:
            filters["affiliate_id"] = affiliate_id
        cash_outs = build_settlement_service().list_cash_outs(filters)
        return Response(CashOutSerializer(cash_outs, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            cash_out = build_settlement_service().get_cash_out(pk)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(CashOutSerializer(cash_out).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/cash-outs/ with ``affiliate_id`` and optional proof."""
        return run_command(
            PerformCashOutDTO,
            request.data,
            CashOutSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/cash-outs/{pk}/confirm/ (affiliate received payment)"""
        return run_command(ConfirmCashOutDTO, {"cash_out_id": pk}, CashOutSerializer)

    @action(detail=False, methods=["get"], url_path=r"preview/(?P<affiliate_id>[0-9]+)")
    def preview(self, request: Request, affiliate_id: str) -> Response:
        """GET /api/v1/cash-outs/preview/{affiliate_id}/ (unsettled balance)"""
        try:
            preview = build_settlement_service().preview(affiliate_id)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(SettlementPreviewSerializer(preview).data)
