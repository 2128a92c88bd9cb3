"""Referral and coupon constants."""

from django.db import models


class ReferralStatus(models.TextChoices):
    ACTIVE_ORDER = "ACTIVE_ORDER", "Pedido activo"
    COMPLETED = "COMPLETED", "Completado"
    CANCELLED = "CANCELLED", "Cancelado"


COUPON_PREFIX = "REGALO-"
COUPON_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ01256789"
COUPON_CODE_LENGTH = 6
COUPON_CODE_MAX_RETRIES = 5
