"""Shared JSON-over-HTTP plumbing for the upstream clients."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from octodash.integrations.errors import DecodeError, TransportError, UpstreamError
from octodash.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10


class JSONServiceClient:
    """One request, one response, no retries.

    Failures are raised as TransportError, UpstreamError or DecodeError so the
    caller decides what a failed call means for its pipeline.
    """

    service_name = "upstream"

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _make_request(
        self, endpoint: str, method: str = "GET", **kwargs: Any
    ) -> Mapping[str, Any]:
        """
        Make a single request and decode the JSON object it returns

        Args:
            endpoint: API endpoint (e.g., "/api/printer")
            method: HTTP method (GET, POST, etc.)
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON object

        Raises:
            TransportError: connection failure or timeout
            UpstreamError: HTTP status >= 400
            DecodeError: body is not a JSON object
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        try:
            logger.debug(f"{method} {url} {kwargs.get('json') or ''}")
            response = self.session.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(f"{self.service_name} request to {url} timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{self.service_name} request to {url} failed: {e}") from e

        logger.debug(f"Response status code: {response.status_code}")
        if response.status_code >= 400:
            raise UpstreamError(response.status_code, response.text)

        try:
            result = response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(result, Mapping):
            raise DecodeError(f"Expected a JSON object from {url}, got {type(result).__name__}")
        return result

    @staticmethod
    def _optional_str(value: Optional[Any]) -> str:
        return "" if value is None else str(value)
