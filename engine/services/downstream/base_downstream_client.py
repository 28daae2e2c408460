"""Base client for HTTP calls to downstream services."""

from typing import Any

import requests
import structlog

from engine.exceptions import DownstreamServiceError, DownstreamServiceUnavailableError

logger = structlog.get_logger(__name__)


class BaseDownstreamClient:
    """Shared request handling for downstream HTTP clients.

    Server errors raise ``DownstreamServiceUnavailableError`` and other
    non-2xx responses raise ``DownstreamServiceError``. Timeouts and
    connection errors propagate as ``requests`` exceptions.
    """

    def __init__(self, service_name: str, base_url: str, timeout: float = 10):
        """Initialize base downstream client.

        Args:
            service_name: Name of the downstream service (for logging/errors)
            base_url: Base URL for the service
            timeout: Request timeout in seconds
        """
        self.service_name = service_name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        """Headers sent with every request; subclasses add credentials."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _post(self, path: str, payload: dict[str, Any]) -> requests.Response:
        """POST a JSON payload to ``base_url + path``.

        Raises:
            DownstreamServiceError: For 4xx responses
            DownstreamServiceUnavailableError: For 5xx responses
            requests.Timeout: When the service does not answer in time
            requests.ConnectionError: When the service cannot be reached
        """
        url = f"{self.base_url}{path}"
        log = logger.bind(service=self.service_name, method="POST", url=url)

        try:
            response = requests.post(
                url,
                headers=self._get_headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.Timeout:
            log.error("downstream_request_timed_out", timeout=self.timeout)
            raise
        except requests.ConnectionError as e:
            log.error("downstream_connection_failed", error=str(e))
            raise

        log.info("downstream_response_received", status_code=response.status_code)

        if response.status_code >= 500:
            log.error(
                "downstream_server_error",
                status_code=response.status_code,
                response_text=response.text,
            )
            raise DownstreamServiceUnavailableError(
                service_name=self.service_name,
                status_code=response.status_code,
            )

        if response.status_code >= 400:
            log.error(
                "downstream_client_error",
                status_code=response.status_code,
                response_text=response.text,
            )
            raise DownstreamServiceError(
                message=(
                    f"{self.service_name} returned "
                    f"{response.status_code}: {response.text}"
                ),
                service_name=self.service_name,
                status_code=response.status_code,
            )

        return response
