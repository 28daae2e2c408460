"""Global exception handlers for the smart notification service."""

import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from django.conf import settings
from django.http import Http404

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from engine.exceptions.downstream_exceptions import DownstreamServiceUnavailableError
from engine.exceptions.engine_exceptions import (
    EngineStateError,
    NotificationNotFoundError,
    PriorityModelError,
)
from engine.logging.context import get_request_id

logger = logging.getLogger(__name__)

_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "internal_error",
    status.HTTP_503_SERVICE_UNAVAILABLE: "service_unavailable",
}


def custom_exception_handler(
    exc: Exception, context: dict[str, Any]
) -> Response | None:
    """Custom exception handler for Django REST Framework.

    Handles both DRF and engine exceptions, providing:
    - Standard response format for clients: {error, status, message, request_id, timestamp}
    - Detailed logging for troubleshooting: error type, path, stack trace

    Args:
        exc: The exception that was raised.
        context: Context dictionary containing request and view information.

    Returns:
        A Response object with the error details.
    """
    view = context.get("view")
    request = view.request if view else None
    request_id = get_request_id()

    response = exception_handler(exc, context)

    if response is None:
        if isinstance(exc, (NotificationNotFoundError, Http404)):
            message = (
                str(exc)
                if isinstance(exc, NotificationNotFoundError)
                else "The requested resource was not found."
            )
            response = Response(
                _create_error_response(
                    status_code=status.HTTP_404_NOT_FOUND,
                    message=message,
                    request_id=request_id,
                ),
                status=status.HTTP_404_NOT_FOUND,
            )
        elif isinstance(exc, PriorityModelError):
            response = Response(
                _create_error_response(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    message=str(exc),
                    request_id=request_id,
                ),
                status=status.HTTP_400_BAD_REQUEST,
            )
        elif isinstance(exc, (EngineStateError, DownstreamServiceUnavailableError)):
            response = Response(
                _create_error_response(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    message=str(exc),
                    request_id=request_id,
                ),
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        else:
            response = Response(
                _create_error_response(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    message="An internal server error occurred.",
                    request_id=request_id,
                ),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

    if request_id and response:
        response["X-Request-ID"] = request_id

    _log_exception(exc, request, response)

    return response


def _create_error_response(
    status_code: int,
    message: str,
    request_id: str | None,
) -> dict[str, Any]:
    """Create a standardized error response body.

    Args:
        status_code: HTTP status code.
        message: Client-facing error message.
        request_id: Request ID for correlation, if available.

    Returns:
        Error response dictionary.
    """
    return {
        "error": _ERROR_CODES.get(status_code, "error"),
        "status": status_code,
        "message": message,
        "request_id": request_id,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def _log_exception(
    exc: Exception,
    request: Any,
    response: Response | None,
) -> None:
    """Log detailed exception information for troubleshooting.

    In DEBUG mode, logs include stack traces.

    Args:
        exc: The exception that was raised.
        request: The HTTP request object.
        response: The response object (if available).
    """
    status_code = response.status_code if response else 500
    if isinstance(exc, (Http404, APIException, NotificationNotFoundError)) or (
        400 <= status_code < 500
    ):
        log_level = logging.WARNING
    else:
        log_level = logging.ERROR

    error_type = type(exc).__name__
    request_path = request.path if request else "unknown"
    request_method = request.method if request else "unknown"

    log_message = (
        f"Exception occurred: {error_type}: {exc} | "
        f"Path: {request_method} {request_path} | "
        f"Status: {status_code}"
    )

    if settings.DEBUG:
        stack_trace = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
        log_message += f"\nStack trace:\n{stack_trace}"

    logger.log(log_level, log_message)
