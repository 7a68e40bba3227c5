"""
OctoPrint API client for OctoDash
Fetches printer state, job progress and the loaded spool for one printer
"""

from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from octodash.integrations.errors import DecodeError, UpstreamError
from octodash.integrations.http import DEFAULT_TIMEOUT, JSONServiceClient
from octodash.integrations.octoprint.types import (
    CurrentSpoolPayload,
    RawJobInfo,
    RawPrinterState,
)
from octodash.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

THUMBNAIL_PATH = "/plugin/prusaslicerthumbnails/thumbnail/{name}.png"
GCODE_EXTENSIONS = (".gcode", ".bgcode")


class OctoPrintAPI(JSONServiceClient):
    """Client for a single OctoPrint instance"""

    service_name = "OctoPrint"

    def __init__(self, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        """
        Initialize OctoPrint API client

        Args:
            base_url: Base URL of the OctoPrint instance
            api_key: OctoPrint API key, sent as X-Api-Key
            timeout: Per-request timeout in seconds
        """
        super().__init__(base_url, timeout)
        self.api_key = api_key

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["X-Api-Key"] = self.api_key
        headers["Content-Type"] = "application/json"
        return headers

    def _decode(
        self, parser: Callable[[Mapping[str, Any]], T], payload: Mapping[str, Any], endpoint: str
    ) -> T:
        try:
            return parser(payload)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Malformed {endpoint} response from {self.base_url}: {e}") from e

    def get_printer_state(self) -> RawPrinterState:
        """
        Get state flags and bed/tool0 temperatures

        Returns:
            RawPrinterState parsed from /api/printer
        """
        response = self._make_request("/api/printer")
        return self._decode(RawPrinterState.from_payload, response, "/api/printer")

    def get_job(self) -> RawJobInfo:
        """
        Get the active job and its progress

        Returns:
            RawJobInfo parsed from /api/job
        """
        response = self._make_request("/api/job")
        return self._decode(RawJobInfo.from_payload, response, "/api/job")

    def get_current_spool(self, tool: int = 0) -> Optional[str]:
        """
        Ask the Spoolman plugin which spool is loaded on a tool

        Args:
            tool: Tool index (0 for single-extruder printers)

        Returns:
            Spool id as a string, or None when no spool is selected
        """
        payload = {"command": "get_current_spool", "tool": tool}
        response: CurrentSpoolPayload = self._make_request(
            "/api/plugin/spoolman_api", method="POST", json=payload
        )
        if not response.get("success"):
            raise UpstreamError(None, f"API error: {response.get('error', '')}")

        spool_id = self._optional_str(response.get("spool_id")).strip()
        return spool_id or None

    def get_thumbnail_url(self, path: str) -> str:
        """
        Build the slicer thumbnail URL for a job file

        The browser fetches the image itself, this never touches the network.

        Args:
            path: Job file path as reported by OctoPrint

        Returns:
            Thumbnail URL, or "" for an empty path
        """
        return thumbnail_url(self.base_url, path)


def thumbnail_url(base_url: str, path: str) -> str:
    if not path:
        return ""
    name = path
    for extension in GCODE_EXTENSIONS:
        if name.endswith(extension):
            name = name[: -len(extension)]
    return base_url.rstrip("/") + THUMBNAIL_PATH.format(name=name)
