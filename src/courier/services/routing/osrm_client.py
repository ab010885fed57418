"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings

logger = logging.getLogger(__name__)

TRIP_PARAMS = {
    "overview": "full",
    "geometries": "geojson",
    "roundtrip": "false",
    "source": "first",
    "annotations": "distance",
}


class OSRMError(Exception):
    """Raised when the OSRM service cannot produce a usable response."""


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        # Injected in tests to serve canned responses
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), transport=self._transport)

    async def trip(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Request a one-way trip that starts at the first coordinate.

        Args:
            coordinates: Sequence of (lat, lon) tuples, start point first

        Returns:
            Decoded OSRM response body. The caller decides what a missing trip means.

        Raises:
            OSRMError: on transport failure, non-2xx status or a body that is not a JSON object.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM trip.")

        # OSRM expects "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        url = f"{self.base_url}/trip/v1/{self.profile}/{coordinate_str}"

        logger.debug(f"Requesting OSRM trip for {len(coordinates)} coordinates")
        async with self._get_client() as client:
            try:
                response = await client.get(url, params=TRIP_PARAMS)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise OSRMError(
                    f"OSRM trip request failed with status {exc.response.status_code}: {exc.response.text[:200]}"
                ) from exc
            except httpx.HTTPError as exc:
                raise OSRMError(f"Failed to reach OSRM service at {self.base_url}: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise OSRMError("OSRM trip response is not valid JSON.") from exc
        if not isinstance(data, dict):
            raise OSRMError("OSRM trip response is not a JSON object.")
        return data


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health with a minimal two-point trip request.

    Public OSRM endpoints may not have a /health endpoint, so we test
    connectivity with the same service the sequencing pipeline uses.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    test_coords = "13.388860,52.517037;13.385983,52.496891"
    url = f"{base.rstrip('/')}/trip/v1/{settings.osrm_profile}/{test_coords}"
    try:
        response = httpx.get(url, params={"roundtrip": "false", "source": "first"}, timeout=5.0)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning(f"OSRM health check failed: {exc}")
        return False
    return isinstance(data, dict) and data.get("code") == "Ok"
