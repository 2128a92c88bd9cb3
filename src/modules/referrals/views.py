"""Referral and coupon API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.api import run_command
from modules.referrals.constants import ReferralStatus
from modules.referrals.dtos import CompleteReferralDTO, DeleteCouponDTO, ToggleCouponDTO
from modules.referrals.handlers import build_referral_service
from modules.referrals.models import Coupon, Referral
from modules.referrals.serializers import CouponSerializer, ReferralSerializer


class ReferralViewSet(GenericViewSet):
    queryset = Referral.objects.all()

    def list(self, request: Request) -> Response:
        """GET /api/v1/referrals/?status=ACTIVE_ORDER&eligible=true"""
        service = build_referral_service()
        if request.query_params.get("eligible") == "true":
            referrals = service.eligible_referrals()
        else:
            filters = {}
            status_value = request.query_params.get("status")
            if status_value in ReferralStatus.values:
                filters["status"] = status_value
            referrals = service.list_referrals(filters)
        return Response(ReferralSerializer(referrals, many=True).data)

    @action(detail=True, methods=["post"])
    def complete(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/referrals/{pk}/complete/ (mints the reward coupon)"""
        return run_command(
            CompleteReferralDTO,
            {"referral_id": pk},
            CouponSerializer,
            success_status=status.HTTP_201_CREATED,
        )


class CouponViewSet(GenericViewSet):
    queryset = Coupon.objects.all()
    lookup_value_regex = r"[^/]+"

    def list(self, request: Request) -> Response:
        coupons = build_referral_service().list_coupons()
        return Response(CouponSerializer(coupons, many=True).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        return run_command(
            DeleteCouponDTO, {"code": pk}, success_status=status.HTTP_204_NO_CONTENT
        )

    @action(detail=True, methods=["post"])
    def toggle(self, request: Request, pk: str | None = None) -> Response:
        return run_command(ToggleCouponDTO, {"code": pk}, CouponSerializer)
