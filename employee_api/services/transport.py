"""
HttpTransport - Raw HTTP access to the upstream employee API.

Translates httpx failures into the call layer's error taxonomy and
decodes JSON bodies. No retries, breaking or fallbacks happen here.
"""

from typing import Any

import httpx
from loguru import logger

from employee_api.services.errors import (
    RequestTimeoutError,
    TransientNetworkError,
    UpstreamApplicationError,
    UpstreamDecodeError,
)


class HttpTransport:
    """Async HTTP transport bound to one upstream base URL."""

    def __init__(
        self,
        base_url: str,
        service_id: str = "employee_api",
        read_timeout: float = 3.0,
        connect_timeout: float = 2.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url
        self.service_id = service_id
        self._read_timeout = read_timeout
        self._connect_timeout = connect_timeout

        # HTTP client (lazy initialization unless injected)
        self._http_client: httpx.AsyncClient | None = client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(
                    self._read_timeout, connect=self._connect_timeout
                ),
            )
        return self._http_client

    async def request(
        self,
        method: str,
        path: str = "",
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        """
        Execute one HTTP request.

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: Path relative to the base URL
            json_data: JSON body

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            RequestTimeoutError: If the request times out
            TransientNetworkError: For connection and other transport failures
            UpstreamApplicationError: For non-2xx responses
            UpstreamDecodeError: If the body is not valid JSON
        """
        client = await self._get_http_client()
        logger.debug(f"→ {method} {self.base_url}{path}")

        try:
            response = await client.request(method=method, url=path, json=json_data)

        except httpx.TimeoutException as e:
            logger.warning(f"✖ {method} {path} timed out: {e!r}")
            timeout = (
                self._connect_timeout
                if isinstance(e, httpx.ConnectTimeout)
                else self._read_timeout
            )
            raise RequestTimeoutError(self.service_id, timeout) from e

        except httpx.TransportError as e:
            logger.warning(f"✖ {method} {path} failed: {e!r}")
            raise TransientNetworkError(str(e), service_id=self.service_id) from e

        logger.debug(f"← {method} {self.base_url}{path} -> {response.status_code}")

        if not response.is_success:
            raise UpstreamApplicationError(
                self.service_id, response.status_code, response.text
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamDecodeError(
                f"Invalid JSON from {method} {path}: {e}", service_id=self.service_id
            ) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("HttpTransport closed")
