"""
Spoolman API client for OctoDash
Resolves a spool id to its filament, vendor and weight data
"""

from urllib.parse import quote

from octodash.integrations.errors import DecodeError
from octodash.integrations.http import JSONServiceClient
from octodash.integrations.spoolman.types import RawSpoolInfo
from octodash.logger import get_logger

logger = get_logger(__name__)


class SpoolmanAPI(JSONServiceClient):
    """Client for the Spoolman filament inventory"""

    service_name = "Spoolman"

    def get_spool(self, spool_id: str) -> RawSpoolInfo:
        """
        Get one spool record

        Args:
            spool_id: Spoolman spool id

        Returns:
            RawSpoolInfo parsed from /api/v1/spool/<id>
        """
        logger.debug(f"Looking up spool {spool_id}")
        # Dots are escaped too so an id of ".." stays a path segment
        segment = quote(str(spool_id), safe="").replace(".", "%2E")
        endpoint = f"/api/v1/spool/{segment}"
        response = self._make_request(endpoint)
        try:
            return RawSpoolInfo.from_payload(response)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Malformed spool {spool_id} from {self.base_url}: {e}") from e
