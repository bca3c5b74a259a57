# core/api.py

"""
API ERROR NORMALIZATION

Maps the fulfillment error taxonomy onto HTTP responses:

    {"error": {"code": "...", "message": "...", "identifier": "..."}}

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]; anything that is not a
FulfillmentError falls through to DRF's default handler.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    ConflictError,
    EmptyCartError,
    ExcessRemovalError,
    FulfillmentError,
    InsufficientStockError,
    InvalidArgumentError,
    InvalidCartTransitionError,
    NoActiveCartError,
    NotFoundError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

# Order matters: first isinstance match wins.
STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NoActiveCartError, status.HTTP_404_NOT_FOUND),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (ExcessRemovalError, status.HTTP_400_BAD_REQUEST),
    (EmptyCartError, status.HTTP_400_BAD_REQUEST),
    (InvalidCartTransitionError, status.HTTP_409_CONFLICT),
    (InsufficientStockError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def error_response(*, code: str, message: str, http_status: int, identifier=None):
    return Response(
        {"error": {"code": code, "message": message, "identifier": identifier}},
        status=http_status,
    )


def status_for(exc: FulfillmentError) -> int:
    for cls, http_status in STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def fulfillment_exception_handler(exc, context):
    if not isinstance(exc, FulfillmentError):
        return exception_handler(exc, context)

    http_status = status_for(exc)
    if exc.retryable:
        logger.warning(
            "Retryable fulfillment failure",
            extra={"code": exc.code, "identifier": exc.identifier},
        )

    response = error_response(
        code=exc.code,
        message=exc.message,
        http_status=http_status,
        identifier=exc.identifier,
    )
    if http_status == status.HTTP_503_SERVICE_UNAVAILABLE:
        response["Retry-After"] = "1"
    return response
