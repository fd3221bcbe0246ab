"""
DRF exception handler for application errors.

Maps the core.exceptions hierarchy onto HTTP responses so views can let
service-layer exceptions propagate instead of catching them one by one.
Anything else falls through to DRF's default handler.

Status mapping:
    ValidationError       -> 400
    NotFoundError         -> 404
    ConflictError         -> 409
    StorageError          -> 503
    BaseApplicationError  -> 400

Configured in settings:
    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.exception_handlers.application_exception_handler",
    }
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

# Ordered: first match wins, subclasses before bases
STATUS_BY_ERROR: list[tuple[type[BaseApplicationError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: BaseApplicationError) -> int:
    """Return the HTTP status code for an application error."""
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def application_exception_handler(
    exc: Exception, context: dict[str, Any]
) -> Response | None:
    """
    Convert BaseApplicationError into a JSON error response.

    The message is returned verbatim so the calling layer can present it
    to the operator.
    """
    if isinstance(exc, BaseApplicationError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(
                f"Request failed: {exc}",
                extra={"error_code": exc.error_code, "details": exc.details},
            )
        return Response(exc.to_dict(), status=status_code)

    return exception_handler(exc, context)
