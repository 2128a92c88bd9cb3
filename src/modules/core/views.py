import time
from typing import Any, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.db.models import Count
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework import serializers
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.api import run_command
from modules.core.dtos import UpdateSettingsDTO
from modules.core.models import EventStatus, OutboxEvent, PlatformSettings
from modules.core.services import PlatformSettingsService

logger = structlog.get_logger(__name__)


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    # Check database
    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_db_failure")

    # Check cache
    try:
        start = time.monotonic()
        cache.set("_health_check", "ok", 10)
        result = cache.get("_health_check")
        if result != "ok":
            raise ConnectionError("Cache read failed")
        services["cache"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["cache"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_cache_failure")

    # Outbox backlog is informational; a stuck relay keeps the status healthy.
    if services["database"]["status"] == "up":
        backlog = {
            row["status"]: row["total"]
            for row in OutboxEvent.objects.filter(
                status__in=[EventStatus.PENDING, EventStatus.FAILED]
            )
            .order_by()
            .values("status")
            .annotate(total=Count("id"))
        }
        services["outbox"] = {
            "pending": backlog.get(EventStatus.PENDING, 0),
            "failed": backlog.get(EventStatus.FAILED, 0),
        }

    status_code = 200 if overall_healthy else 503

    logger.info(
        "health_check_completed", status="healthy" if overall_healthy else "unhealthy"
    )

    return JsonResponse(
        {
            "status": "healthy" if overall_healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status_code,
    )


class PlatformSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlatformSettings
        fields = [
            "commission_rate_cents",
            "tortilla_price",
            "reward_tortillas",
            "admin_phone",
            "bank_details",
            "updated_at",
        ]
        read_only_fields = fields


class PlatformSettingsView(APIView):
    """GET / PATCH /api/v1/settings"""

    def get(self, request: Request) -> Response:
        settings_row = PlatformSettingsService().get_settings()
        return Response(PlatformSettingsSerializer(settings_row).data)

    def patch(self, request: Request) -> Response:
        return run_command(UpdateSettingsDTO, request.data, PlatformSettingsSerializer)
