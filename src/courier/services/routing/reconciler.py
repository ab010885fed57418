"""Recover the visiting order of stops from a trip geometry.

OSRM's trip geometry is a raster of path coordinates; it does not say which
submitted stop sits where. Each stop is located on the geometry by a
``Matcher`` and the stops are then sorted by that position.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ...config import settings
from ...models.domain import LatLng, Waypoint

logger = logging.getLogger(__name__)

NOT_FOUND = -1


class Matcher(Protocol):
    def position(self, lat: float, lng: float, geometry: Sequence[LatLng]) -> int:
        """Return the geometry index a coordinate belongs to, or NOT_FOUND."""
        ...


class ToleranceMatcher:
    """First geometry point within a fixed lat/lng box around the stop."""

    def __init__(self, tolerance: float | None = None) -> None:
        self.tolerance = tolerance if tolerance is not None else settings.match_tolerance_degrees

    def position(self, lat: float, lng: float, geometry: Sequence[LatLng]) -> int:
        for index, (g_lat, g_lng) in enumerate(geometry):
            if abs(g_lat - lat) < self.tolerance and abs(g_lng - lng) < self.tolerance:
                return index
        return NOT_FOUND


def reconcile_order(
    waypoints: Sequence[Waypoint],
    geometry: Sequence[LatLng],
    matcher: Matcher | None = None,
) -> list[Waypoint]:
    """Sort waypoints by where they appear along the geometry.

    Unmatched stops get NOT_FOUND and therefore land at the front. Ties keep
    their submitted order since ``sorted`` is stable.
    """
    matcher = matcher or ToleranceMatcher()
    positions = [matcher.position(w.lat, w.lng, geometry) for w in waypoints]

    unmatched = positions.count(NOT_FOUND)
    if unmatched and geometry:
        logger.debug(f"{unmatched} of {len(waypoints)} waypoints could not be matched onto the trip geometry")

    order = sorted(range(len(waypoints)), key=lambda i: positions[i])
    return [waypoints[i] for i in order]
