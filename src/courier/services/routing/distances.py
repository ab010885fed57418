"""Attach predecessor distances to an ordered list of stops."""

from __future__ import annotations

from dataclasses import replace
from typing import Literal, Sequence

from ...models.domain import Waypoint
from ..geospatial import haversine_km

DistanceMode = Literal["leg", "haversine"]


def annotate_distances(
    ordered: Sequence[Waypoint],
    legs: Sequence[float],
    mode: DistanceMode = "leg",
) -> list[Waypoint]:
    """Return copies of ``ordered`` with ``distance_from_previous`` set in metres.

    ``leg`` mode gives the stop at position i the trip leg i-1 (0.0 if OSRM
    returned fewer legs). Legs follow the reconciled order, so after grouping
    this is the leg at that position, not the pair distance.
    ``haversine`` mode measures each adjacent pair of the final order instead.
    The first stop never gets a distance.
    """
    if mode not in ("leg", "haversine"):
        raise ValueError(f"Unknown distance mode '{mode}'.")

    annotated: list[Waypoint] = []
    for index, waypoint in enumerate(ordered):
        if index == 0:
            annotated.append(replace(waypoint, distance_from_previous=None))
            continue
        if mode == "leg":
            distance = float(legs[index - 1]) if index - 1 < len(legs) else 0.0
        else:
            previous = ordered[index - 1]
            distance = haversine_km(previous.lat, previous.lng, waypoint.lat, waypoint.lng) * 1000.0
        annotated.append(replace(waypoint, distance_from_previous=distance))
    return annotated
