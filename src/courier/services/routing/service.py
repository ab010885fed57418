"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...models.domain import Route, Waypoint
from ...persistence.filesystem import FileStorage
from ..outputs.routing_formatter import route_to_csv, route_to_json
from .distances import DistanceMode, annotate_distances
from .grouping import group_by_code
from .reconciler import Matcher, reconcile_order
from .sequencing import TripClient, fetch_optimized_trip

logger = logging.getLogger(__name__)


async def plan_route(
    waypoints: Sequence[Waypoint],
    start_index: int,
    *,
    client: TripClient,
    group: bool | None = None,
    matcher: Matcher | None = None,
    distance_mode: DistanceMode | None = None,
) -> Route:
    """Run the full sequencing pipeline and return a fresh Route.

    OSRM failures propagate unchanged so the caller can keep showing the
    previous route.
    """
    group = settings.group_by_code if group is None else group
    distance_mode = distance_mode or settings.distance_mode

    trip = await fetch_optimized_trip(waypoints, start_index, client)
    if not trip.geometry:
        # Nothing to reconcile against; short input or no trip found
        ordered = list(trip.waypoints)
    else:
        ordered = reconcile_order(trip.waypoints, trip.geometry, matcher)
    if group:
        ordered = group_by_code(ordered)
    annotated = annotate_distances(ordered, trip.legs, mode=distance_mode)

    route = Route(waypoints=tuple(annotated), geometry=tuple(trip.geometry))
    logger.info(
        f"Planned route with {len(route)} stops, {len(route.geometry)} geometry points, "
        f"grouped={group}, distance_mode={distance_mode}, total={route.total_distance:.0f} m"
    )
    return route


def persist_route(route: Route, delivered: Sequence[int] = (), storage: FileStorage | None = None) -> str:
    """Write summary.json and stops.csv for a route; returns the run directory."""
    storage = storage or FileStorage()
    run_dir = storage.make_run_directory(prefix="route")
    storage.write_json(run_dir / "summary.json", route_to_json(route, delivered))
    storage.write_csv(run_dir / "stops.csv", route_to_csv(route, delivered))
    logger.info(f"Persisted route outputs to {run_dir}")
    return str(run_dir)
