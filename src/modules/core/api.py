"""Command dispatch and translation of domain errors into HTTP responses.

Views catch ``DomainError`` only; anything else propagates to DRF.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Type

from pydantic import ValidationError as PydanticValidationError
from rest_framework import serializers, status
from rest_framework.response import Response

from shared.domain.commands import Command
from shared.domain.exceptions import (
    DomainError,
    EntityNotFound,
    InvalidTransition,
    PartialCommitRisk,
    PreconditionFailed,
)
from shared.infrastructure.bus import command_bus

_STATUS_BY_ERROR = (
    (EntityNotFound, status.HTTP_404_NOT_FOUND),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (PartialCommitRisk, status.HTTP_409_CONFLICT),
    (PreconditionFailed, status.HTTP_400_BAD_REQUEST),
)


def domain_error_response(exc: DomainError) -> Response:
    for error_cls, http_status in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            break
    else:
        http_status = status.HTTP_400_BAD_REQUEST
    return Response(
        {"detail": str(exc), "code": exc.__class__.__name__},
        status=http_status,
    )


def validation_error_response(exc: PydanticValidationError) -> Response:
    """Reject a command that failed construction-time validation."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    return Response(
        {"detail": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def run_command(
    command_class: Type[Command],
    data: Mapping[str, Any],
    serializer_class: Optional[Type[serializers.BaseSerializer]] = None,
    success_status: int = status.HTTP_200_OK,
) -> Response:
    """Build *command_class* from *data*, dispatch it and render the result.

    Construction errors become 400 responses, domain errors are mapped by
    :func:`domain_error_response`.
    """
    try:
        command = command_class(**data)
    except PydanticValidationError as exc:
        return validation_error_response(exc)
    try:
        result = command_bus.dispatch(command)
    except DomainError as exc:
        return domain_error_response(exc)
    if serializer_class is None:
        return Response(status=success_status)
    return Response(serializer_class(result).data, status=success_status)
