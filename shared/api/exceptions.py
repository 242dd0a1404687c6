"""Translate core errors into HTTP responses."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.errors import ErrorKind, RentalCoreError

logger = logging.getLogger(__name__)

HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_DATES: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_RATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CAR_NOT_AVAILABLE: status.HTTP_409_CONFLICT,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorKind.STORAGE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def core_exception_handler(exc, context):
    """REST_FRAMEWORK EXCEPTION_HANDLER: core errors first, DRF's defaults after."""

    if isinstance(exc, RentalCoreError):
        http_status = HTTP_STATUS_BY_KIND[exc.kind]
        if http_status >= 500:
            logger.error(f"Core operation failed: {exc.message}", exc_info=exc)
        return Response({"error": exc.kind.value, "detail": exc.message}, status=http_status)

    return exception_handler(exc, context)
