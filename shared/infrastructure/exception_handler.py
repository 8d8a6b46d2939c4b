"""DRF exception handler translating domain errors into API responses."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    BookingRejected,
    DomainError,
    DuplicatePending,
    Forbidden,
    InsufficientSeats,
    InvalidRoleSet,
    InvalidTransition,
    NotFound,
    OperationFailed,
    RejectionReason,
    TransientStorageFault,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (InsufficientSeats, status.HTTP_409_CONFLICT),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (DuplicatePending, status.HTTP_409_CONFLICT),
    (InvalidRoleSet, status.HTTP_400_BAD_REQUEST),
    (OperationFailed, status.HTTP_503_SERVICE_UNAVAILABLE),
    (TransientStorageFault, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainError) -> int:
    if isinstance(exc, BookingRejected):
        if exc.reason == RejectionReason.NO_CAPACITY:
            return status.HTTP_409_CONFLICT
        return status.HTTP_400_BAD_REQUEST
    for error_type, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):
    """Render DomainError subclasses; defer everything else to DRF."""
    if not isinstance(exc, DomainError):
        return drf_exception_handler(exc, context)

    http_status = status_for(exc)
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"
    if http_status >= 500:
        logger.error("Domain fault in %s: %s", view_name, exc.message, exc_info=exc)
    else:
        logger.info("Domain rejection in %s: %s (%s)", view_name, exc.message, exc.code)

    payload = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, BookingRejected):
        payload["reason"] = exc.reason.value
    return Response(payload, status=http_status)
