"""Region Lookup Client - Imperative Shell.

This module handles HTTP communication with the administrative region
lookup service (provinces and their wards). All I/O is contained here;
record normalization is in the core module.

Every fetch fails soft: network and decoding errors are logged and an
empty list is returned, so callers never have to tell "no results" apart
from "fetch failed".
"""

import logging
from typing import Any

import requests

from src.core.config import PROVINCES_API, WARDS_API
from src.core.region import Region, parse_provinces, parse_wards


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


class RegionClient:
    """Client for fetching provinces and wards.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        provinces_url: str = PROVINCES_API,
        wards_url: str = WARDS_API,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize region client.

        Args:
            provinces_url: Provinces endpoint
            wards_url: Wards endpoint
            timeout: Request timeout in seconds
        """
        self.provinces_url = provinces_url
        self.wards_url = wards_url
        self.timeout = timeout

    def _post(self, url: str, form: dict[str, str]) -> Any:
        """POST a form and decode the JSON response.

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the body is not valid JSON
        """
        response = requests.post(
            url,
            data=form,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def fetch_provinces(self) -> list[Region]:
        """Fetch all provinces.

        This method performs HTTP I/O.

        Returns:
            Provinces in source order, deduplicated by code; empty on failure
        """
        logger.info("Fetching provinces from %s", self.provinces_url)

        try:
            payload = self._post(self.provinces_url, {})
        except (requests.RequestException, ValueError) as e:
            logger.error("Failed to fetch provinces: %s", str(e))
            return []

        provinces = parse_provinces(payload)
        logger.info("Fetched %d provinces", len(provinces))
        return provinces

    def fetch_wards(self, province_code: str) -> list[Region]:
        """Fetch the wards of a province.

        This method performs HTTP I/O, except for an empty province code
        which returns immediately.

        Args:
            province_code: Province to fetch wards for

        Returns:
            Wards scoped to province_code; empty on failure
        """
        if not province_code:
            return []

        logger.info("Fetching wards for province %s", province_code)

        try:
            payload = self._post(self.wards_url, {"id": province_code})
        except (requests.RequestException, ValueError) as e:
            logger.error(
                "Failed to fetch wards for province %s: %s",
                province_code,
                str(e),
            )
            return []

        wards = parse_wards(payload, province_code)
        logger.info("Fetched %d wards for province %s", len(wards), province_code)
        return wards
