"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict
from typing import Iterable

from ...models.domain import Route


def route_to_json(route: Route, delivered: Iterable[int] = ()) -> dict:
    delivered_set = set(delivered)
    return {
        "stop_count": len(route),
        "total_distance_m": route.total_distance,
        "geometry": [list(point) for point in route.geometry],
        "stops": [
            {"position": position, "delivered": position in delivered_set, **asdict(waypoint)}
            for position, waypoint in enumerate(route.waypoints)
        ],
    }


def route_to_csv(route: Route, delivered: Iterable[int] = ()) -> str:
    delivered_set = set(delivered)
    buffer = io.StringIO()
    fieldnames = [
        "position",
        "stop",
        "sequence",
        "latitude",
        "longitude",
        "address",
        "tracking_code",
        "grouping_code",
        "distance_from_prev_km",
        "delivered",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for position, waypoint in enumerate(route.waypoints):
        distance = waypoint.distance_from_previous
        writer.writerow(
            {
                "position": position + 1,
                "stop": waypoint.stop_id,
                "sequence": waypoint.sequence,
                "latitude": waypoint.lat,
                "longitude": waypoint.lng,
                "address": waypoint.address,
                "tracking_code": waypoint.tracking_code or "",
                "grouping_code": waypoint.grouping_code or "",
                "distance_from_prev_km": "" if distance is None else f"{distance / 1000:.2f}",
                "delivered": "yes" if position in delivered_set else "no",
            }
        )
    return buffer.getvalue()
