"""Order domain constants.

Defines status and payment-method choices and the valid status
transitions of the order state machine.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION", "Pendiente de confirmación"
    ACTIVE = "ACTIVE", "Activo"
    FINISHED = "FINISHED", "Finalizado"
    CANCELLED = "CANCELLED", "Cancelado"


class PaymentMethod(models.TextChoices):
    CASH = "CASH", "Efectivo"
    TRANSFER = "TRANSFER", "Transferencia"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING_CONFIRMATION: {OrderStatus.ACTIVE, OrderStatus.CANCELLED},
    OrderStatus.ACTIVE: {OrderStatus.FINISHED, OrderStatus.CANCELLED},
    OrderStatus.FINISHED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.FINISHED, OrderStatus.CANCELLED}

# Reopening is a correction applied to cancelled orders only; it is not
# part of VALID_TRANSITIONS.
REOPENABLE_STATES: set[str] = {OrderStatus.CANCELLED}
