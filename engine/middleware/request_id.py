"""Request ID middleware for correlating logs across services."""

import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from engine.constants import REQUEST_ID_HEADER
from engine.logging.context import clear_request_id, set_request_id


class RequestIDMiddleware:
    """Attach a request ID to every request, its log lines and its response.

    An incoming ``X-Request-ID`` header is reused so a notification can be
    traced from the calling service through the engine. Otherwise a UUID4 is
    generated. The ID lives in a context variable for the duration of the
    request and is cleared afterwards.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize the middleware.

        Args:
            get_response: The next middleware or view in the chain.
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Bind the request ID and echo it on the response."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        set_request_id(request_id)
        request.request_id = request_id  # type: ignore[attr-defined]

        try:
            response = self.get_response(request)
            response[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_id()
