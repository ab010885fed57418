"""Per-session state: loaded stops, current route and delivery flags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..models.domain import Route, Waypoint
from ..persistence.session_store import SessionStore
from .delivery.tracker import DeliveryTracker
from .geospatial import google_maps_directions_url
from .routing.distances import DistanceMode
from .routing.reconciler import Matcher
from .routing.sequencing import TripClient
from .routing.service import plan_route

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NextStop:
    position: int
    waypoint: Waypoint
    navigation_url: str


class RouteSession:
    """Owns the waypoints and route shown to one courier.

    A failed recomputation leaves the previous route and its delivery flags
    untouched; a successful one replaces the route wholesale and clears them.
    """

    def __init__(self, store: SessionStore, client: TripClient, *, matcher: Matcher | None = None) -> None:
        self.client = client
        self.matcher = matcher
        self.tracker = DeliveryTracker(store)
        self.waypoints: list[Waypoint] = []
        self.route: Route | None = None

    def load_waypoints(self, waypoints: Sequence[Waypoint]) -> None:
        self.waypoints = list(waypoints)
        self.route = None
        self.tracker.reset()
        logger.info(f"Loaded {len(self.waypoints)} waypoints; route and delivery state cleared")

    async def compute_route(
        self,
        start_index: int,
        *,
        group: bool | None = None,
        distance_mode: DistanceMode | None = None,
    ) -> Route:
        if not self.waypoints:
            raise ValueError("No waypoints loaded. Upload a spreadsheet first.")
        route = await plan_route(
            self.waypoints,
            start_index,
            client=self.client,
            group=group,
            matcher=self.matcher,
            distance_mode=distance_mode,
        )
        self.route = route
        self.tracker.reset()
        return route

    def _require_route(self) -> Route:
        if self.route is None:
            raise LookupError("No route has been computed yet.")
        return self.route

    def toggle_delivered(self, position: int) -> bool:
        route = self._require_route()
        if not 0 <= position < len(route):
            raise IndexError(f"Position {position} is outside the current route of {len(route)} stops.")
        return self.tracker.toggle(position)

    def next_stop(self) -> NextStop | None:
        route = self._require_route()
        position = self.tracker.next_pending(len(route))
        if position is None:
            return None
        waypoint = route.waypoints[position]
        return NextStop(
            position=position,
            waypoint=waypoint,
            navigation_url=google_maps_directions_url(waypoint.lat, waypoint.lng),
        )
