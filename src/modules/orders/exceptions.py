"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) translates them into HTTP responses through
``modules.core.api.domain_error_response``.
"""

from __future__ import annotations

from shared.domain.exceptions import EntityNotFound, InvalidTransition


class OrderNotFound(EntityNotFound):
    """The requested order does not exist."""


class InvalidOrderStatus(InvalidTransition):
    """The order's current status does not allow the requested transition."""


class OrderAlreadySettled(InvalidTransition):
    """The order is already covered by a cash-out."""
