"""Ask OSRM for a visiting order starting from a chosen stop."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from ...models.domain import LatLng, Waypoint
from .osrm_client import OSRMError

logger = logging.getLogger(__name__)


class TripClient(Protocol):
    async def trip(self, coordinates: Sequence[tuple[float, float]]) -> dict: ...


@dataclass(slots=True)
class TripResult:
    """Stops as submitted (start first) plus the geometry and leg distances OSRM returned."""

    waypoints: list[Waypoint]
    geometry: list[LatLng] = field(default_factory=list)
    legs: list[float] = field(default_factory=list)


def rotate_to_start(waypoints: Sequence[Waypoint], start_index: int) -> list[Waypoint]:
    if not 0 <= start_index < len(waypoints):
        raise ValueError(f"Start index {start_index} is out of range for {len(waypoints)} waypoints.")
    return [waypoints[start_index], *(w for i, w in enumerate(waypoints) if i != start_index)]


def extract_trip(data: dict) -> tuple[list[LatLng], list[float]]:
    """Pull (lat, lng) geometry and leg distances out of the first trip, if any."""
    trips = data.get("trips") or []
    if not trips:
        return [], []
    trip = trips[0]
    coordinates = (trip.get("geometry") or {}).get("coordinates") or []
    geometry = [(float(lat), float(lng)) for lng, lat, *_ in coordinates]
    legs = [float(leg.get("distance") or 0.0) for leg in trip.get("legs") or []]
    return geometry, legs


async def fetch_optimized_trip(
    waypoints: Sequence[Waypoint],
    start_index: int,
    client: TripClient,
) -> TripResult:
    """Request an optimized one-way trip for the waypoints.

    Fewer than two waypoints never hit the network. Oracle failures are not
    caught here; they propagate to the caller.
    """
    if not waypoints:
        return TripResult(waypoints=[])
    reordered = rotate_to_start(waypoints, start_index)
    if len(reordered) < 2:
        return TripResult(waypoints=reordered)

    data = await client.trip([w.coordinate for w in reordered])
    try:
        geometry, legs = extract_trip(data)
    except (AttributeError, LookupError, TypeError, ValueError) as exc:
        raise OSRMError(f"Malformed OSRM trip response: {exc}") from exc
    if not geometry:
        logger.warning(f"OSRM returned no trip for {len(reordered)} waypoints (code={data.get('code')!r})")
    return TripResult(waypoints=reordered, geometry=geometry, legs=legs)
