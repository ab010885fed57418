"""Domain models for delivery stops and computed routes."""

from dataclasses import dataclass
from typing import Optional

LatLng = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A single delivery stop parsed from the source spreadsheet."""

    stop_id: int
    sequence: int
    lat: float
    lng: float
    address: str = ""
    tracking_code: Optional[str] = None
    grouping_code: Optional[str] = None
    # metres from the previous stop in the final route order
    distance_from_previous: Optional[float] = None

    @property
    def coordinate(self) -> LatLng:
        return (self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class Route:
    """Ordered stops plus the path polyline returned by the routing service."""

    waypoints: tuple[Waypoint, ...] = ()
    geometry: tuple[LatLng, ...] = ()

    def __len__(self) -> int:
        return len(self.waypoints)

    @property
    def total_distance(self) -> float:
        return sum(w.distance_from_previous or 0.0 for w in self.waypoints)
